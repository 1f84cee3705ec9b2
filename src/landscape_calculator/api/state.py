"""Shared API objects: one engine, the feature catalog and the order counter."""
from ..config.settings import get_settings
from ..data.feature_catalog import load_feature_catalog
from ..engine import PricingEngine
from ..services.session import OrderSequence

settings = get_settings()
engine = PricingEngine(settings)
catalog = load_feature_catalog(settings.feature_catalog)
order_sequence = OrderSequence()
