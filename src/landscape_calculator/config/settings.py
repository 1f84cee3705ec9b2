"""
Centralized settings, pricing constants and path configuration for the calculator.
"""
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


DAY_POLICIES = ('per_unit', 'per_feature')
DELIVERY_MODELS = ('estimate', 'adjustable')


def get_package_root() -> Path:
    """Directory of the landscape_calculator package."""
    return Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class PricingPolicy:
    """Constants of the area → price/days model and the feature/delivery policies."""

    # Base price: coefficient * A ** exponent, A in millions of blocks
    price_coefficient: float = 26.58
    price_exponent: float = 0.414
    area_unit: int = 1_000_000

    # Large-map surcharge (step function on the derived square side)
    surcharge_side: float = 15000
    surcharge_multiplier: float = 1.96

    # Base price is rounded to the nearest multiple of this
    price_rounding: int = 10

    # Recommended delivery time
    min_days: int = 5
    days_per_million: float = 0.21

    # "per_unit": days_per_unit * quantity, "per_feature": days_per_unit once
    day_policy: str = 'per_unit'

    # "estimate": totals from area + features
    # "adjustable": customer picks delivery days, price moves per day of deviation
    delivery_model: str = 'estimate'
    price_per_day_adjustment: float = 6
    minimum_total_price: float = 30

    def validate(self) -> list[str]:
        """Return a list of configuration errors (empty when valid)."""
        errors = []
        if self.day_policy not in DAY_POLICIES:
            errors.append(f"Unknown day_policy '{self.day_policy}' (expected one of {', '.join(DAY_POLICIES)})")
        if self.delivery_model not in DELIVERY_MODELS:
            errors.append(f"Unknown delivery_model '{self.delivery_model}' (expected one of {', '.join(DELIVERY_MODELS)})")
        if self.price_rounding <= 0:
            errors.append("price_rounding must be positive")
        if self.area_unit <= 0:
            errors.append("area_unit must be positive")
        return errors


@dataclass(frozen=True)
class SizeBounds:
    """Allowed map side lengths in blocks."""
    min: float = 100
    max: float = 35000
    default: float = 1000
    snap_points: tuple = (1000, 5000, 10000, 20000, 25000)
    snap_threshold: float = 200


@dataclass(frozen=True)
class DeliveryBounds:
    """Allowed delivery-days range for the adjustable delivery model."""
    min: int = 1
    max: int = 120
    default: int = 5


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Input files
    feature_catalog: Path

    pricing: PricingPolicy = field(default_factory=PricingPolicy)
    size: SizeBounds = field(default_factory=SizeBounds)
    delivery: DeliveryBounds = field(default_factory=DeliveryBounds)

    @classmethod
    def load(
        cls,
        pricing: Optional[PricingPolicy] = None,
        feature_catalog: Optional[Path] = None,
    ) -> 'Settings':
        """Load settings, validating the pricing policy."""
        pricing = pricing or PricingPolicy()

        errors = pricing.validate()
        if errors:
            raise ValueError("Invalid pricing policy: " + "; ".join(errors))

        return cls(
            feature_catalog=feature_catalog or get_package_root() / 'data' / 'feature_catalog.csv',
            pricing=pricing,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
