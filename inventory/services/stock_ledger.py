"""
Stock ledger: the only writer of the godown/counter counters on Stock.

Every change runs inside transaction.atomic() and writes a StockMovement row in
the same transaction. Decrements are conditional UPDATEs (``stock >= qty``), so
two callers racing on the same product cannot drive a counter below zero; the
loser gets InsufficientStockError and nothing is changed.
"""
import logging
from typing import NamedTuple

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from ..exceptions import InsufficientStockError, InvalidLocationError, InvalidQuantityError, NotFoundError
from ..models import Location, Stock, StockMovement

log = logging.getLogger(__name__)

LOCATIONS = tuple(Location.values)


class StockLevel(NamedTuple):
    godown: int
    counter: int

    @property
    def total(self) -> int:
        return self.godown + self.counter


def _field(location: str) -> str:
    return f"{location}_stock"


def _check_location(location):
    if location not in LOCATIONS:
        raise InvalidLocationError(location, reason=f"Unknown stock location: {location!r}")


def _check_quantity(quantity):
    """Movement quantities are whole units, at least 1."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(quantity, reason=f"Quantity must be a whole number above zero, got {quantity!r}")


def _check_count(value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidQuantityError(value, reason=f"Stock must be a whole number of zero or more, got {value!r}")


def _raise_shortfall(product_id, location, requested):
    stock = Stock.objects.select_related("product").filter(product_id=product_id).first()
    if stock is None:
        raise NotFoundError(product_id)
    raise InsufficientStockError(
        product_id, location, stock.quantity_at(location), requested, name=str(stock.product)
    )


def get_stock(product_id) -> StockLevel:
    row = Stock.objects.filter(product_id=product_id).values("godown_stock", "counter_stock").first()
    if row is None:
        raise NotFoundError(product_id)
    return StockLevel(row["godown_stock"], row["counter_stock"])


def transfer_stock(product_id, quantity, from_location, to_location, *, notes=""):
    """Move quantity units between the two locations. Returns the new StockLevel."""
    _check_quantity(quantity)
    _check_location(from_location)
    _check_location(to_location)
    if from_location == to_location:
        raise InvalidLocationError(
            from_location, to_location, reason="From and To locations must be different."
        )
    src, dst = _field(from_location), _field(to_location)
    with transaction.atomic():
        updated = Stock.objects.filter(product_id=product_id, **{f"{src}__gte": quantity}).update(
            **{src: F(src) - quantity, dst: F(dst) + quantity, "updated_at": timezone.now()}
        )
        if not updated:
            _raise_shortfall(product_id, from_location, quantity)
        StockMovement.objects.create(
            product_id=product_id,
            movement_type=StockMovement.TRANSFER,
            quantity=quantity,
            from_location=from_location,
            to_location=to_location,
            notes=notes,
        )
    log.info("Transferred %s unit(s) of product %s from %s to %s", quantity, product_id, from_location, to_location)
    return get_stock(product_id)


def update_stock(product_id, godown_stock, counter_stock, *, notes="Manual stock edit"):
    """
    Absolute overwrite of both counters (manual correction path).
    Each location that changes gets an ADJUST movement for the difference.
    """
    _check_count(godown_stock)
    _check_count(counter_stock)
    with transaction.atomic():
        try:
            stock = Stock.objects.select_for_update().get(product_id=product_id)
        except Stock.DoesNotExist:
            raise NotFoundError(product_id) from None
        movements = []
        for location, new_value in ((Location.GODOWN, godown_stock), (Location.COUNTER, counter_stock)):
            delta = new_value - stock.quantity_at(location)
            if delta == 0:
                continue
            movements.append(StockMovement(
                product_id=product_id,
                movement_type=StockMovement.ADJUST,
                quantity=abs(delta),
                from_location="" if delta > 0 else location,
                to_location=location if delta > 0 else "",
                notes=notes,
            ))
        stock.godown_stock = godown_stock
        stock.counter_stock = counter_stock
        stock.save(update_fields=["godown_stock", "counter_stock", "updated_at"])
        StockMovement.objects.bulk_create(movements)
    if movements:
        log.info("Stock for product %s set to godown=%s counter=%s", product_id, godown_stock, counter_stock)
    return StockLevel(godown_stock, counter_stock)


def receive_stock(product_id, quantity, location=Location.GODOWN, *, notes=""):
    """Goods in (purchase / opening stock)."""
    _check_quantity(quantity)
    _check_location(location)
    field = _field(location)
    with transaction.atomic():
        updated = Stock.objects.filter(product_id=product_id).update(
            **{field: F(field) + quantity, "updated_at": timezone.now()}
        )
        if not updated:
            raise NotFoundError(product_id)
        StockMovement.objects.create(
            product_id=product_id,
            movement_type=StockMovement.IN,
            quantity=quantity,
            to_location=location,
            notes=notes,
        )
    return get_stock(product_id)


def remove_stock(product_id, quantity, location=Location.COUNTER, *, reference_id=None, notes=""):
    """Goods out (sales come off the counter). Never goes below zero."""
    _check_quantity(quantity)
    _check_location(location)
    field = _field(location)
    with transaction.atomic():
        updated = Stock.objects.filter(product_id=product_id, **{f"{field}__gte": quantity}).update(
            **{field: F(field) - quantity, "updated_at": timezone.now()}
        )
        if not updated:
            _raise_shortfall(product_id, location, quantity)
        StockMovement.objects.create(
            product_id=product_id,
            movement_type=StockMovement.OUT,
            quantity=quantity,
            from_location=location,
            reference_id=reference_id,
            notes=notes,
        )
    return get_stock(product_id)


def stock_movements(limit=None, product_id=None):
    """Latest movements, newest first."""
    if limit is None:
        limit = settings.STOCK_MOVEMENTS_LIMIT
    qs = StockMovement.objects.select_related("product")
    if product_id is not None:
        qs = qs.filter(product_id=product_id)
    return list(qs.order_by("-created_at", "-id")[:limit])
