"""
Numeric utilities shared by every funnel calculation.

Ratios in this system are total: a zero (or negative) denominator yields 0
rather than an error, because "no leads this week" is a displayable business
state. User input is coerced the same way: anything that does not parse as a
finite number becomes 0.

Rounding follows half-up semantics (2.5 -> 3, -2.5 -> -2), which is what the
planning sheets display, instead of Python's default round-half-even.

Large-number formatting uses the lakh / crore scale:
- >= 1,00,00,000 (1e7): "x.xx Cr"
- >= 1,00,000 (1e5): "x.xx L"
- otherwise grouped digits
"""

import math
from typing import Any, Optional

import numpy as np

from funnel_planner.core.config import get_settings
from funnel_planner.models.enums import TaxMode


# =============================================================================
# Constants
# =============================================================================

CRORE: float = 10_000_000.0
LAKH: float = 100_000.0


# =============================================================================
# Safe Arithmetic
# =============================================================================


def finite_or_zero(value: float) -> float:
    """Return `value` as a float, or 0 when it is NaN or infinite."""
    value = float(value)
    return value if np.isfinite(value) else 0.0


def safe_divide(numerator: float, denominator: float) -> float:
    """
    Divide, returning 0 when the denominator is <= 0 or the quotient is not finite.

    Example:
        >>> safe_divide(500000, 0)
        0.0
        >>> safe_divide(500000, 100)
        5000.0
    """
    if denominator is None or denominator <= 0:
        return 0.0
    return finite_or_zero(float(numerator) / float(denominator))


def ratio_percent(numerator: float, denominator: float) -> float:
    """Safe ratio expressed as a percentage."""
    return finite_or_zero(safe_divide(numerator, denominator) * 100.0)


def coerce_number(raw: Any) -> float:
    """
    Coerce raw user input to a float.

    None, empty strings, unparseable text, NaN and infinities all become 0.
    Strings may carry thousands separators ("1,20,000").
    """
    if raw is None or isinstance(raw, bool):
        return float(raw or 0)
    if isinstance(raw, str):
        raw = raw.strip().replace(',', '')
        if not raw:
            return 0.0
    try:
        value = float(raw)
    except (ValueError, TypeError, OverflowError):
        return 0.0
    return finite_or_zero(value)


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round to `digits` decimal places, halves rounding towards +infinity.

    Values that are not finite, or overflow once scaled, round to 0.

    Example:
        >>> round_half_up(2.5)
        3.0
        >>> round_half_up(6.125, 2)
        6.13
    """
    scale = 10 ** digits
    scaled = value * scale + 0.5
    if not np.isfinite(scaled):
        return 0.0
    return math.floor(scaled) / scale


def round_count(value: float) -> int:
    """Round a count or whole-currency figure to an int."""
    return int(round_half_up(value))


# =============================================================================
# Tax-Inclusion View
# =============================================================================


def tax_factor(mode: TaxMode, multiplier: Optional[float] = None) -> float:
    """
    Multiplier applied to monetary figures under the given tax mode.

    The inclusive multiplier defaults to Settings.tax_multiplier.
    """
    if mode != TaxMode.INCLUSIVE:
        return 1.0
    if multiplier is None:
        multiplier = get_settings().tax_multiplier
    return multiplier


def to_tax_view(value: float, mode: TaxMode, multiplier: Optional[float] = None) -> float:
    """Convert a stored (tax-exclusive) figure into the view's tax mode."""
    return value * tax_factor(mode, multiplier)


def from_tax_view(value: float, mode: TaxMode, multiplier: Optional[float] = None) -> float:
    """Inverse of to_tax_view."""
    return value / tax_factor(mode, multiplier)


# =============================================================================
# Display Formatting
# =============================================================================


def format_large_currency(value: float) -> str:
    """
    Format a currency figure on the lakh / crore scale.

    Example:
        >>> format_large_currency(13386111)
        '1.34 Cr'
        >>> format_large_currency(250000)
        '2.50 L'
        >>> format_large_currency(4819)
        '4,819'
    """
    if value >= CRORE:
        return f"{value / CRORE:.2f} Cr"
    if value >= LAKH:
        return f"{value / LAKH:.2f} L"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def format_count(value: float) -> str:
    """Compact count formatting: 2778 -> '2.8k'."""
    if value >= 1000:
        return f"{value / 1000:.1f}k"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"
