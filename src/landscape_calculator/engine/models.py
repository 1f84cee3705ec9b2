"""
Data models for the pricing engine.

Uses frozen dataclasses so a configuration or result can never be patched in
place; edits produce new values (see updates.py).
"""
import math
from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class FeatureEntry:
    """A togglable line item of an order."""
    key: str
    name: str
    enabled: bool = False
    quantity: int = 1
    price_per_unit: float = 0.0
    days_per_unit: float = 0.0
    group: Optional[str] = None  # None, "structures" or "custom"
    description: str = ""

    @property
    def is_custom(self) -> bool:
        return self.group == 'custom'


@dataclass(frozen=True)
class OrderConfig:
    """Everything the customer has chosen. Replaced wholesale on every edit."""
    width: float
    length: float
    features: tuple[FeatureEntry, ...] = ()

    # Only read by the adjustable delivery model
    delivery_days: Optional[int] = None

    def get_feature(self, key: str) -> FeatureEntry:
        """Look up a feature entry by key."""
        for feature in self.features:
            if feature.key == key:
                return feature
        raise KeyError(f"Unknown feature '{key}'")


@dataclass(frozen=True)
class BaseQuote:
    """Area-derived price and delivery estimate, before any feature."""
    area: float
    magnitude: float  # area in millions of blocks
    derived_side: float
    raw_price: float
    adjusted_price: float
    base_price: float
    recommended_days: float
    surcharge_applied: bool


@dataclass(frozen=True)
class FeatureLine:
    """Contribution of one enabled feature."""
    key: str
    name: str
    quantity: int
    price: float
    days: float


@dataclass(frozen=True)
class FeatureTotals:
    """Sum of all enabled feature contributions."""
    extra_price: float
    extra_days: float
    lines: tuple[FeatureLine, ...] = ()


@dataclass(frozen=True)
class PricingResult:
    """Complete result of a pricing calculation."""
    area: float
    base_price: float
    recommended_days: float
    total_price: float
    total_days: float

    price_adjustment: float = 0.0
    feature_lines: tuple[FeatureLine, ...] = ()
    trace: tuple[TraceStep, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        """False when a published number is NaN or infinite."""
        values = (self.area, self.base_price, self.recommended_days, self.total_price, self.total_days)
        return all(math.isfinite(v) for v in values)

    def get_trace_text(self) -> str:
        """Get human-readable result trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Plain dict for JSON responses and display tables."""
        data = asdict(self)
        data['valid'] = self.is_valid
        return data
