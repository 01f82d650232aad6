from decimal import Decimal, ROUND_HALF_UP


def _money(x) -> float:
    return float(Decimal(str(x)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def compute_totals(items, delivery_charge: float) -> dict:
    """Subtotal over retained lines (quantity > 0) plus the delivery charge."""
    subtotal = 0.0
    for l in items:
        if l.quantity > 0:
            subtotal += float(l.unit_price) * int(l.quantity)

    return {
        "subtotal": _money(subtotal),
        "delivery_charge": _money(delivery_charge),
        "grand_total": _money(subtotal + float(delivery_charge)),
    }
