"""Integer arithmetic for reserve amounts.

All prices, collateral and fees are ints in the token's smallest unit.
No float, no Decimal. Every division floors.
"""

BASIS_POINTS = 10_000
PERCENT = 100


def is_valid_collateral_percent(collateral_percent: int) -> bool:
    """Collateral percent is in basis points: 0 < pct < 10000 (strictly below 100%)."""
    return 0 < collateral_percent < BASIS_POINTS


def is_valid_fee_percent(fee_percent: int) -> bool:
    """Cancel fees are whole percents in [0, 100)."""
    return 0 <= fee_percent < PERCENT


def required_collateral(price: int, collateral_percent: int) -> int:
    """Collateral the buyer must lock: floor(price * collateral_percent / 10000)."""
    return price * collateral_percent // BASIS_POINTS


def cancel_fee(price: int, fee_percent: int) -> int:
    """Fee charged to the canceling party: floor(price * fee_percent / 100)."""
    if price == 0 or fee_percent == 0:
        return 0
    return price * fee_percent // PERCENT
