"""Trip booking price calculation."""

from decimal import ROUND_HALF_UP, Decimal

MONEY_QUANTUM = Decimal("0.01")


def to_money(amount: Decimal | int | str) -> Decimal:
    """Quantize an amount to two fractional digits."""
    return Decimal(amount).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def unit_price(price: Decimal, discount_price: Decimal | None) -> Decimal:
    """Per-person price: the discount price when set, else the list price."""
    return to_money(discount_price if discount_price is not None else price)


def calculate_total_price(
    price: Decimal,
    discount_price: Decimal | None,
    number_of_people: int,
) -> Decimal:
    """Total price for a party.

    >>> calculate_total_price(Decimal("100"), None, 3)
    Decimal('300.00')
    >>> calculate_total_price(Decimal("100"), Decimal("80"), 2)
    Decimal('160.00')
    """
    if number_of_people < 1:
        raise ValueError("number_of_people must be at least 1")
    return to_money(unit_price(price, discount_price) * number_of_people)
