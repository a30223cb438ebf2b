from decimal import Decimal

from inventory.models import Product, Stock


def make_product(name="Kingfisher", sku=None, godown=0, counter=0, price="120.00", cost="80.00",
                 variant="", min_level=0, max_level=1000, **extra):
    """Product plus its Stock row set to the given levels (bypasses the ledger)."""
    product = Product.objects.create(
        name=name,
        sku=sku or name.upper().replace(" ", "-"),
        variant=variant,
        price=Decimal(price),
        cost=Decimal(cost),
        **extra,
    )
    Stock.objects.filter(product=product).update(
        godown_stock=godown, counter_stock=counter, min_stock_level=min_level, max_stock_level=max_level,
    )
    product.refresh_from_db()
    product.stock.refresh_from_db()
    return product
