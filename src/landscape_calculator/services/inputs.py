"""
Input coercion - turns raw widget/request values into numbers the engine accepts.

The engine assumes finite, in-range sizes; everything here exists so it never
sees anything else.
"""
import math
from typing import Optional, Union

from ..config.settings import SizeBounds, DeliveryBounds
from ..engine.pricing_engine import round_half_up


Number = Union[int, float]


def _to_float(value) -> Optional[float]:
    """Parse a number from text or a number; None when invalid or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _as_int_if_whole(value: float) -> Number:
    return int(value) if float(value).is_integer() else value


def clamp_size(value: Number, bounds: SizeBounds) -> Number:
    """Clamp a side length to [min, max]. NaN and invalid values fall back to min."""
    number = _to_float(value)
    if number is None or number < bounds.min:
        return bounds.min
    if number > bounds.max:
        return bounds.max
    return _as_int_if_whole(number)


def parse_size_text(text: str, bounds: SizeBounds) -> Number:
    """Coerce typed size text ("", "abc", "1e9", "2500") into a valid side length."""
    return clamp_size(text, bounds)


def snap_size(value: Number, bounds: SizeBounds) -> Number:
    """Snap a slider value to the nearest snap point within the snap threshold."""
    value = clamp_size(value, bounds)
    nearest = None
    for point in bounds.snap_points:
        distance = abs(point - value)
        if distance <= bounds.snap_threshold and (nearest is None or distance < abs(nearest - value)):
            nearest = point
    return nearest if nearest is not None else value


def parse_quantity(text) -> int:
    """Quantity field: at least 1; empty or invalid text counts as 0, then 1."""
    number = _to_float(text)
    return max(1, int(number) if number is not None else 0)


def parse_price(text) -> float:
    """Price-per-unit field: non-negative float."""
    number = _to_float(text)
    return max(0.0, number if number is not None else 0.0)


def parse_days(text) -> int:
    """Days-per-unit field: non-negative whole days."""
    number = _to_float(text)
    return max(0, int(number) if number is not None else 0)


def clamp_delivery_days(value, bounds: DeliveryBounds) -> int:
    """Clamp a chosen delivery time to [min, max] whole days."""
    number = _to_float(value)
    if number is None:
        return bounds.default
    return int(min(bounds.max, max(bounds.min, round_half_up(number))))
