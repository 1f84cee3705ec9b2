"""Engine subpackage - core pricing logic and configuration models."""
from .pricing_engine import PricingEngine, compute, compute_base, aggregate_features
from .models import OrderConfig, FeatureEntry, PricingResult
from .updates import with_size, with_feature, with_delivery_days

__all__ = [
    'PricingEngine', 'compute', 'compute_base', 'aggregate_features',
    'OrderConfig', 'FeatureEntry', 'PricingResult',
    'with_size', 'with_feature', 'with_delivery_days',
]
