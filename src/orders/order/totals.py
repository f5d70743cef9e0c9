"""Monetary totals shared by carts and orders.

There is no delivery fee, tax or discount: the total always equals the
subtotal.
"""


def line_total(line) -> float:
    """A line's stored ``item_total`` when it has one, else price times quantity."""
    if line.item_total:
        return line.item_total
    return (line.price or 0.0) * (line.quantity or 0)


def calculate_totals(lines) -> tuple[float, float]:
    """Return ``(subtotal, total_amount)`` for ``lines``."""
    subtotal = sum(line_total(line) for line in lines)
    return subtotal, subtotal
