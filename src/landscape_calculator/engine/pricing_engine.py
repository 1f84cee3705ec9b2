"""
Pricing Engine - area and feature based quote calculation with traceability.

The engine is pure: a quote depends only on the OrderConfig passed in and the
immutable PricingPolicy. It keeps no state between calls, performs no I/O and
never raises for numeric input. Out-of-domain sizes (negative, NaN, inf) are
carried through as non-finite numbers so the caller can refuse to display them.

Resolution order:
1. Area → base price (power law, large-map surcharge, rounded to tens)
2. Area → recommended delivery days (floored at min_days)
3. Enabled features → extra price and extra days
4. Totals, rounded once at the end and floored
"""
import math
from typing import Iterable, Optional

from ..config.settings import PricingPolicy, Settings, get_settings
from .models import (
    BaseQuote,
    FeatureEntry,
    FeatureLine,
    FeatureTotals,
    OrderConfig,
    PricingResult,
    TraceStep,
)


def round_half_up(value: float) -> float:
    """Round to the nearest integer, .5 going up. Non-finite values pass through."""
    if not math.isfinite(value):
        return value
    whole = math.floor(value)
    # value + 0.5 can itself round up in floating point
    return whole + 1 if value - whole >= 0.5 else whole


def round_to_multiple(value: float, step: float) -> float:
    """Round to the nearest multiple of step (half up)."""
    return round_half_up(value / step) * step


def _at_least(value: float, floor: float) -> float:
    # max() would swallow NaN when the floor comes first
    if math.isnan(value):
        return value
    return max(floor, value)


def compute_base(width: float, length: float, policy: Optional[PricingPolicy] = None) -> BaseQuote:
    """
    Convert a map size into a base price and a recommended delivery time.

    Callers clamp width/length to the configured bounds first. A negative or
    non-finite area yields NaN/inf fields instead of an invented price.
    """
    policy = policy or PricingPolicy()

    area = width * length
    if width >= 0 and length >= 0:
        magnitude = area / policy.area_unit
        derived_side = math.sqrt(area)
    else:
        magnitude = math.nan
        derived_side = math.nan

    raw_price = policy.price_coefficient * magnitude ** policy.price_exponent

    surcharge_applied = derived_side >= policy.surcharge_side
    adjusted_price = raw_price * policy.surcharge_multiplier if surcharge_applied else raw_price

    base_price = round_to_multiple(adjusted_price, policy.price_rounding)
    recommended_days = _at_least(round_half_up(magnitude * policy.days_per_million), policy.min_days)

    return BaseQuote(
        area=area,
        magnitude=magnitude,
        derived_side=derived_side,
        raw_price=raw_price,
        adjusted_price=adjusted_price,
        base_price=base_price,
        recommended_days=recommended_days,
        surcharge_applied=surcharge_applied,
    )


def aggregate_features(features: Iterable[FeatureEntry], policy: Optional[PricingPolicy] = None) -> FeatureTotals:
    """
    Fold every enabled feature into extra price and extra days.

    Grouping (structures, custom) is ignored here; all entries are one flat
    collection. Disabled entries contribute nothing but keep their values.
    """
    policy = policy or PricingPolicy()

    extra_price = 0
    extra_days = 0
    lines = []

    for feature in features:
        if not feature.enabled:
            continue

        price = feature.price_per_unit * feature.quantity
        if policy.day_policy == 'per_feature':
            days = feature.days_per_unit
        else:
            days = feature.days_per_unit * feature.quantity

        extra_price += price
        extra_days += days
        lines.append(FeatureLine(
            key=feature.key,
            name=feature.name,
            quantity=feature.quantity,
            price=price,
            days=days,
        ))

    return FeatureTotals(extra_price=extra_price, extra_days=extra_days, lines=tuple(lines))


def compute(config: OrderConfig, policy: Optional[PricingPolicy] = None) -> PricingResult:
    """
    Calculate a full quote for an order configuration.

    Args:
        config: Clamped order configuration
        policy: Pricing constants and policies (defaults when omitted)

    Returns:
        PricingResult with totals, per-feature lines, trace and warnings
    """
    policy = policy or PricingPolicy()

    base = compute_base(config.width, config.length, policy)
    totals = aggregate_features(config.features, policy)

    trace = [
        TraceStep("Area", f"{config.width} × {config.length} blocks", f"{base.area:,.0f}"),
        TraceStep("Magnitude", f"A = area / {policy.area_unit:,}", f"{base.magnitude:.3f}"),
        TraceStep(
            "Base Price",
            f"{policy.price_coefficient} · A^{policy.price_exponent}",
            f"${base.raw_price:.2f}",
        ),
    ]
    warnings = []

    if base.surcharge_applied:
        trace.append(TraceStep(
            "Surcharge",
            f"Derived side {base.derived_side:,.0f} ≥ {policy.surcharge_side:,.0f}, × {policy.surcharge_multiplier}",
            f"${base.adjusted_price:.2f}",
        ))
        warnings.append(f"Large-map surcharge applied (× {policy.surcharge_multiplier})")

    trace.append(TraceStep("Rounding", f"Nearest {policy.price_rounding}", f"${base.base_price}"))
    trace.append(TraceStep("Recommended Days", f"max({policy.min_days}, A × {policy.days_per_million})", f"{base.recommended_days}"))

    for line in totals.lines:
        trace.append(TraceStep("Feature", f"{line.name} × {line.quantity}", f"+${line.price} / +{line.days}d"))

    estimate_days = base.recommended_days + round_half_up(totals.extra_days)

    if policy.delivery_model == 'adjustable':
        chosen_days = config.delivery_days if config.delivery_days is not None else estimate_days
        price_adjustment = (estimate_days - chosen_days) * policy.price_per_day_adjustment
        total_price = _at_least(
            round_half_up(base.base_price + totals.extra_price + price_adjustment),
            policy.minimum_total_price,
        )
        total_days = chosen_days
        trace.append(TraceStep(
            "Delivery Adjustment",
            f"({estimate_days} - {chosen_days}) days × ${policy.price_per_day_adjustment}",
            f"${price_adjustment}",
        ))
    else:
        price_adjustment = 0
        total_price = _at_least(round_half_up(base.base_price + totals.extra_price), 0)
        total_days = estimate_days

    trace.append(TraceStep("Total", "Price / Days", f"${total_price} / {total_days}d"))

    if not all(math.isfinite(v) for v in (base.area, total_price, total_days)):
        warnings.append("Map size is out of range; cannot display a valid quote")

    return PricingResult(
        area=base.area,
        base_price=base.base_price,
        recommended_days=base.recommended_days,
        total_price=total_price,
        total_days=total_days,
        price_adjustment=price_adjustment,
        feature_lines=totals.lines,
        trace=tuple(trace),
        warnings=tuple(warnings),
    )


class PricingEngine:
    """
    Thin holder of the active Settings around the pure pricing functions.

    Safe to share: it has no mutable state, so the API and the UI keep one
    instance each.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def policy(self) -> PricingPolicy:
        return self.settings.pricing

    def compute_base(self, width: float, length: float) -> BaseQuote:
        return compute_base(width, length, self.policy)

    def aggregate_features(self, features: Iterable[FeatureEntry]) -> FeatureTotals:
        return aggregate_features(features, self.policy)

    def compute(self, config: OrderConfig) -> PricingResult:
        """Calculate a quote under the configured policy."""
        return compute(config, self.policy)
