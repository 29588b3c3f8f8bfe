"""Integer share accounting against a pool's running asset/share totals."""

from .constants import ZERO_SHARES
from .exceptions import ValidationError

PoolTotal = int | str | None


def _coerce_total(value: PoolTotal, field: str) -> int:
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    text = value.strip()
    if not text:
        return 0
    try:
        return int(text, 0) if text.lower().startswith("0x") else int(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid pool total: {value}", field=field, value=value) from exc


def compute_shares(user_amount: int, total_assets: PoolTotal, total_shares: PoolTotal) -> int:
    """Return ``floor(user_amount * total_assets / total_shares)``.

    Totals may arrive as integers or decimal/hex strings straight from a
    contract read. A pool with no recorded liquidity (either total zero or
    missing) yields zero shares.
    """
    assets = _coerce_total(total_assets, "total_assets")
    shares = _coerce_total(total_shares, "total_shares")
    if assets <= 0 or shares <= 0 or user_amount <= 0:
        return 0
    return user_amount * assets // shares


def require_shares(user_amount: int, total_assets: PoolTotal, total_shares: PoolTotal) -> int:
    """Like :func:`compute_shares` but refuses a positive amount that resolves to zero."""
    result = compute_shares(user_amount, total_assets, total_shares)
    if result == 0:
        raise ValidationError(
            ZERO_SHARES,
            field="shares",
            value=0,
            details={
                "amount": user_amount,
                "total_assets": total_assets,
                "total_shares": total_shares,
            },
        )
    return result
