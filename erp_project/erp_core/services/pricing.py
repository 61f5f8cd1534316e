from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import NamedTuple

from ..exceptions import InvalidLineValue

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


class PricedLine(NamedTuple):
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    line_total: Decimal


class PricedDocument(NamedTuple):
    lines: list
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def to_decimal(value, field):
    """Coerce user input (str, int, float, Decimal) to Decimal."""
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise InvalidLineValue(f"{field} is required and must be a number")
    try:
        # str() first so floats like 0.1 keep their printed value
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidLineValue(f"{field} must be a number, got {value!r}")


def validate_line_values(quantity, unit_price, tax_rate):
    quantity = to_decimal(quantity, "quantity")
    unit_price = to_decimal(unit_price, "unit_price")
    tax_rate = to_decimal(tax_rate, "tax_rate")
    if not quantity.is_finite() or quantity <= 0:
        raise InvalidLineValue("Quantity must be greater than zero")
    if not unit_price.is_finite() or unit_price < 0:
        raise InvalidLineValue("Unit price must be >= 0")
    if not tax_rate.is_finite() or tax_rate < 0:
        raise InvalidLineValue("Tax rate must be >= 0")
    return quantity, unit_price, tax_rate


def price_line(quantity, unit_price, tax_rate) -> PricedLine:
    """
    quantity × unit_price = subtotal
    subtotal × tax_rate / 100 = tax (rounded half-up to cents, per line)
    subtotal + tax = line total
    """
    quantity, unit_price, tax_rate = validate_line_values(
        quantity, unit_price, tax_rate)
    subtotal = (quantity * unit_price).quantize(CENT, rounding=ROUND_HALF_UP)
    tax = (subtotal * tax_rate / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)
    return PricedLine(
        quantity=quantity,
        unit_price=unit_price,
        tax_rate=tax_rate,
        subtotal=subtotal,
        tax_amount=tax,
        line_total=subtotal + tax,
    )


def price_lines(lines) -> PricedDocument:
    """
    Price every line (mappings with quantity, unit_price, tax_rate) and
    aggregate the document totals.
    All lines are validated before anything is returned, so a bad line
    rejects the whole document. Document tax is the sum of per-line taxes.
    """
    priced = [
        price_line(line.get("quantity"), line.get("unit_price"), line.get("tax_rate", ZERO))
        for line in lines
    ]
    subtotal = sum((p.subtotal for p in priced), ZERO)
    tax = sum((p.tax_amount for p in priced), ZERO)
    return PricedDocument(
        lines=priced,
        subtotal=subtotal,
        tax_amount=tax,
        total_amount=subtotal + tax,
    )
