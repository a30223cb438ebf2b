"""
Daily Transfer: stage several godown -> counter moves, then commit them as one batch.

TransferStaging is a plain object; the view keeps it in the Django session between
requests (to_session / from_session) so the workflow runs without a browser.

commit_transfer() is all-or-nothing: the stock rows are locked and every entry is
checked against that snapshot before any of them is applied, and the whole batch
(ledger moves + DailyTransfer record) shares one DB transaction.
"""
import logging
from dataclasses import asdict, dataclass
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from common.dates import local_datetime_string
from ..exceptions import EmptyTransferError, InsufficientStockError, NotFoundError, ZeroQuantityError
from ..models import DailyTransfer, Location, Stock
from .stock_ledger import transfer_stock

log = logging.getLogger(__name__)

SESSION_KEY = "daily_transfer_staging"


@dataclass
class StagedTransfer:
    product_id: int
    name: str
    sku: str
    variant: str
    available: int
    quantity: int

    @property
    def is_short(self) -> bool:
        return self.quantity > self.available


def _godown_stock(product) -> int:
    stock = getattr(product, "stock", None)
    return stock.godown_stock if stock is not None else 0


class TransferStaging:
    """Ordered list of pending moves for one user session."""

    def __init__(self, entries=None):
        self.entries = list(entries or [])

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def total_quantity(self) -> int:
        return sum(e.quantity for e in self.entries)

    def get(self, product_id):
        for entry in self.entries:
            if entry.product_id == product_id:
                return entry
        return None

    def add(self, product):
        """
        Stage one more unit of product. Existing entries go up by 1 but never past the
        product's current godown stock; a product with nothing in the godown is ignored.
        """
        available = _godown_stock(product)
        entry = self.get(product.pk)
        if entry is not None:
            entry.available = available
            if entry.quantity < available:
                entry.quantity += 1
            return entry
        if available <= 0:
            return None
        entry = StagedTransfer(
            product_id=product.pk,
            name=product.name,
            sku=product.sku,
            variant=product.variant,
            available=available,
            quantity=1,
        )
        self.entries.append(entry)
        return entry

    def set_quantity(self, product_id, quantity):
        """Clamp to [0, available]. Zero stays staged until removed explicitly."""
        entry = self.get(product_id)
        if entry is None:
            raise NotFoundError(product_id)
        entry.quantity = max(0, min(int(quantity), entry.available))
        return entry

    def remove(self, product_id):
        self.entries = [e for e in self.entries if e.product_id != product_id]

    def clear(self):
        self.entries = []

    def refresh(self, products):
        """
        Pick up reloaded godown stock. Staged quantities are left as the user set them;
        an entry above the new stock shows up as is_short and fails at commit.
        """
        by_id = {p.pk: _godown_stock(p) for p in products}
        for entry in self.entries:
            entry.available = by_id.get(entry.product_id, 0)

    def to_session(self):
        return [asdict(e) for e in self.entries]

    @classmethod
    def from_session(cls, data):
        return cls(StagedTransfer(**row) for row in (data or []))


def load_staging(session) -> TransferStaging:
    return TransferStaging.from_session(session.get(SESSION_KEY))


def save_staging(session, staging: TransferStaging):
    session[SESSION_KEY] = staging.to_session()


def _check_snapshot(staging):
    """Lock the staged products' stock rows and make sure every entry still fits."""
    ids = [e.product_id for e in staging]
    locked = {
        s.product_id: s
        for s in Stock.objects.select_for_update().select_related("product").filter(product_id__in=ids)
    }
    for entry in staging:
        stock = locked.get(entry.product_id)
        if stock is None:
            raise NotFoundError(entry.product_id)
        if entry.quantity > stock.godown_stock:
            raise InsufficientStockError(
                entry.product_id, Location.GODOWN, stock.godown_stock, entry.quantity, name=str(stock.product)
            )


def commit_transfer(staging: TransferStaging) -> DailyTransfer:
    """
    Apply every staged entry godown -> counter, in list order, and record the batch.
    On success the staging list is cleared; on any error nothing is applied and the
    list is left as it was so the user can fix it and retry.
    """
    if staging.is_empty:
        raise EmptyTransferError()
    zero = [e.product_id for e in staging if e.quantity <= 0]
    if zero:
        raise ZeroQuantityError(zero)

    applied = []
    try:
        with transaction.atomic():
            _check_snapshot(staging)
            items = []
            for entry in staging:
                transfer_stock(
                    entry.product_id, entry.quantity, Location.GODOWN, Location.COUNTER, notes="Daily transfer"
                )
                applied.append(entry.product_id)
                items.append({
                    "id": entry.product_id,
                    "name": entry.name,
                    "variant": entry.variant,
                    "quantity": entry.quantity,
                    "transfer_time": local_datetime_string(),
                })
            record = DailyTransfer.objects.create(
                transfer_date=timezone.localdate(),
                total_items=len(items),
                total_quantity=sum(i["quantity"] for i in items),
                items_transferred=items,
            )
    except Exception:
        log.warning(
            "Daily transfer rolled back; staged=%s applied_before_failure=%s",
            [(e.product_id, e.quantity) for e in staging],
            applied,
        )
        raise

    log.info("Daily transfer #%s committed: %s items, %s units", record.pk, record.total_items, record.total_quantity)
    staging.clear()
    return record


def get_history(start_date=None, end_date=None):
    """
    Transfer records whose transfer_date falls in [start_date, end_date], newest first.
    Missing bounds default to the last TRANSFER_HISTORY_DAYS days.
    """
    today = timezone.localdate()
    end_date = end_date or today
    start_date = start_date or (end_date - timedelta(days=settings.TRANSFER_HISTORY_DAYS))
    return list(
        DailyTransfer.objects.filter(transfer_date__range=(start_date, end_date)).order_by("-created_at", "-id")
    )


def transfer_report_rows(record: DailyTransfer, bar_name=""):
    """Rows for the CSV export of one transfer record."""
    if bar_name:
        yield [bar_name]
    yield ["Daily Transfer Report"]
    yield ["Transfer date", record.transfer_date.isoformat()]
    yield ["Total items", record.total_items]
    yield ["Total quantity", record.total_quantity]
    yield []
    yield ["#", "Product", "Variant", "Quantity", "Transfer time"]
    for n, item in enumerate(record.items_transferred, start=1):
        yield [n, item.get("name", ""), item.get("variant") or "", item.get("quantity", 0), item.get("transfer_time", "")]
