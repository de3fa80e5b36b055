from decimal import Decimal

BASE_FARE = Decimal("199")

ITEM_SURCHARGES = {
    "sofaSet": Decimal("50"),
    "bed": Decimal("40"),
    "diningTable": Decimal("30"),
    "wardrobe": Decimal("60"),
    "otherFurniture": Decimal("20"),
}

# Shown on the booking form before any item is ticked.
DEFAULT_ESTIMATE = Decimal("299")


def estimate_price(items) -> Decimal:
    """
    Base fare plus the surcharge of every selected item.
    Accepts a BookingItems record or a plain {name: bool} mapping;
    unknown names are ignored.
    """
    if hasattr(items, "model_dump"):
        items = items.model_dump(by_alias=True)

    total = BASE_FARE
    for name, selected in (items or {}).items():
        if selected and name in ITEM_SURCHARGES:
            total += ITEM_SURCHARGES[name]
    return total


def format_price(amount) -> str:
    return f"${Decimal(amount):.2f}"
