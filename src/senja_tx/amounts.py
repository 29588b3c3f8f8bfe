"""Fixed-point amount conversion between user input and on-chain integers."""

import string
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .constants import APPROVAL_BUFFER_BPS, BPS_DENOMINATOR
from .exceptions import ValidationError

DECIMAL_SEPARATOR = "."
DEFAULT_DISPLAY_CAP = 6

_LARGE_NUMBER_SUFFIXES = (
    (Decimal(10) ** 12, "T"),
    (Decimal(10) ** 9, "B"),
    (Decimal(10) ** 6, "M"),
    (Decimal(10) ** 3, "K"),
)


def sanitize_amount(raw: str) -> str:
    """Keep digits and the first decimal separator; stop at a second separator."""
    kept: list[str] = []
    seen_separator = False
    for char in raw:
        if char in string.digits:
            kept.append(char)
        elif char == DECIMAL_SEPARATOR:
            if seen_separator:
                break
            seen_separator = True
            kept.append(char)
    return "".join(kept)


def parse_amount(value: str | int | Decimal, precision: int) -> int:
    """Convert a decimal amount to an integer scaled by ``10**precision``.

    The integer and fractional parts are split as strings so that large
    magnitudes never pass through floating point. Fractional digits beyond
    ``precision`` are floored away.

    Raises:
        ValidationError: If the input is empty, negative or not numeric.
    """
    if precision < 0:
        raise ValidationError("Precision cannot be negative", field="precision", value=precision)

    if isinstance(value, bool):
        raise ValidationError("Invalid amount", field="amount", value=value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValidationError("Invalid amount", field="amount", value=value)
        text = format(value, "f")
    else:
        text = str(value)

    text = text.strip()
    if text.startswith("-"):
        raise ValidationError("Amount cannot be negative", field="amount", value=value)

    cleaned = sanitize_amount(text)
    if cleaned in ("", DECIMAL_SEPARATOR):
        raise ValidationError(f"Invalid amount format: {value}", field="amount", value=value)

    whole, _, fraction = cleaned.partition(DECIMAL_SEPARATOR)
    fraction = fraction[:precision].ljust(precision, "0")
    return int(whole or "0") * 10**precision + int(fraction or "0")


def to_integer(value: str | int | Decimal, precision: int) -> int:
    """Lenient variant of :func:`parse_amount` that returns 0 for invalid input."""
    try:
        return parse_amount(value, precision)
    except ValidationError:
        return 0


def to_display(
    value: int,
    precision: int,
    display_cap: int | None = DEFAULT_DISPLAY_CAP,
    *,
    trim: bool = False,
) -> str:
    """Render a fixed-point integer as ``whole.fraction``.

    ``display_cap=None`` keeps every fractional digit, which makes the result
    an exact inverse of :func:`parse_amount`. Digits beyond the cap are
    truncated, never rounded up.
    """
    if precision < 0:
        raise ValidationError("Precision cannot be negative", field="precision", value=precision)

    sign = "-" if value < 0 else ""
    whole, remainder = divmod(abs(int(value)), 10**precision)
    fraction = str(remainder).zfill(precision) if precision else ""

    digits = precision if display_cap is None else min(precision, display_cap)
    fraction = fraction[:digits]
    if trim:
        fraction = fraction.rstrip("0")

    if not fraction:
        return f"{sign}{whole}"
    return f"{sign}{whole}{DECIMAL_SEPARATOR}{fraction}"


def display_decimals(precision: int) -> int:
    """Number of fractional digits to show for a token of the given precision."""
    if precision >= 18:
        return 6
    if precision == 8:
        return 4
    if precision == 6:
        return 2
    if precision <= 2:
        return precision
    return 2


def format_token_amount(value: int, precision: int) -> str:
    return to_display(value, precision, display_decimals(precision))


def format_large_number(value: str | int | float | Decimal) -> str:
    """Format a human-scale number with K/M/B/T suffixes."""
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return "0"

    if not number.is_finite() or number == 0:
        return "0"

    magnitude = abs(number)
    for threshold, suffix in _LARGE_NUMBER_SUFFIXES:
        if magnitude >= threshold:
            scaled = (number / threshold).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
            return _strip_zeros(scaled) + suffix

    places = Decimal("0.000001") if magnitude >= 1 else Decimal("0.00000001")
    return _strip_zeros(number.quantize(places, rounding=ROUND_HALF_UP))


def apply_buffer(amount: int, bps: int = APPROVAL_BUFFER_BPS) -> int:
    """Increase an integer amount by ``bps`` basis points, rounding down."""
    if amount < 0:
        raise ValidationError("Amount cannot be negative", field="amount", value=amount)
    if bps < 0:
        raise ValidationError("Buffer cannot be negative", field="bps", value=bps)
    return amount + amount * bps // BPS_DENOMINATOR


def _strip_zeros(number: Decimal) -> str:
    text = format(number, "f")
    if DECIMAL_SEPARATOR in text:
        text = text.rstrip("0").rstrip(DECIMAL_SEPARATOR)
    return text or "0"
