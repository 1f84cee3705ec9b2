"""
Quote Session - the caller side of the engine.

Holds the current OrderConfig and PricingResult, applies one edit at a time
(copy-on-write) and recomputes synchronously. Also owns the order-sequence
counter used to number confirmed orders.
"""
import math
from dataclasses import dataclass
from typing import Optional

from ..config.settings import Settings, get_settings
from ..data.feature_catalog import FeatureCatalog, load_feature_catalog
from ..engine.models import OrderConfig, PricingResult
from ..engine.pricing_engine import PricingEngine
from ..engine.updates import with_delivery_days, with_feature, with_size
from . import inputs


CHUNK_SIZE = 16


def format_amount(value, grouping: bool = True) -> str:
    """Whole amounts without decimals, everything else with two."""
    sep = "," if grouping else ""
    if float(value).is_integer():
        return f"{value:{sep}.0f}"
    return f"{value:{sep}.2f}"


class OrderSequence:
    """Monotonic order counter. One per session/application, never global."""

    def __init__(self, start: int = 1):
        self._next = start

    def next(self) -> int:
        number = self._next
        self._next += 1
        return number

    def peek(self) -> int:
        return self._next


@dataclass(frozen=True)
class OrderSummary:
    """Human-readable snapshot of a confirmed order."""
    order_number: int
    width: float
    length: float
    total_price: float
    total_days: float
    features: tuple[tuple[str, float], ...] = ()

    @classmethod
    def from_quote(cls, order_number: int, config: OrderConfig, result: PricingResult) -> 'OrderSummary':
        return cls(
            order_number=order_number,
            width=config.width,
            length=config.length,
            total_price=result.total_price,
            total_days=result.total_days,
            # a blank custom entry is listed under a generic label
            features=tuple((line.name or "Custom", line.price) for line in result.feature_lines),
        )

    @property
    def chunks(self) -> int:
        return math.ceil(self.width / CHUNK_SIZE) * math.ceil(self.length / CHUNK_SIZE)

    @property
    def order_id(self) -> str:
        return f"#{self.order_number:04d}"

    def to_text(self) -> str:
        lines = [
            f"=== Minecraft Map Order {self.order_id} ===",
            f"Size: {format_amount(self.width, grouping=False)}x{format_amount(self.length, grouping=False)} blocks ({self.chunks:,} chunks)",
            f"Total Price: ${format_amount(self.total_price)}",
            f"Delivery Time: {format_amount(self.total_days)} days",
        ]
        lines.extend(f"{name}: ${format_amount(price)}" for name, price in self.features)
        return "\n".join(lines)


class QuoteSession:
    """
    Interactive quote state.

    Every setter replaces `config` with an updated copy and recomputes
    `result`; neither is ever patched in place.
    """

    def __init__(
        self,
        engine: Optional[PricingEngine] = None,
        catalog: Optional[FeatureCatalog] = None,
        sequence: Optional[OrderSequence] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or (engine.settings if engine else get_settings())
        self.engine = engine or PricingEngine(self.settings)
        self.catalog = catalog or load_feature_catalog(self.settings.feature_catalog)
        self.sequence = sequence or OrderSequence()
        self.config: OrderConfig = self.catalog.default_config(self.settings)
        self.result: PricingResult = self.engine.compute(self.config)

    def _apply(self, config: OrderConfig) -> PricingResult:
        result = self.engine.compute(config)
        self.config = config
        self.result = result
        return result

    def set_size(self, width=None, length=None) -> PricingResult:
        """Set width and/or length from slider values (clamped to bounds)."""
        bounds = self.settings.size
        return self._apply(with_size(
            self.config,
            width=inputs.clamp_size(width, bounds) if width is not None else None,
            length=inputs.clamp_size(length, bounds) if length is not None else None,
        ))

    def set_size_text(self, field_name: str, text: str) -> PricingResult:
        """Set width or length from typed text; invalid text falls back to the minimum."""
        if field_name not in ('width', 'length'):
            raise ValueError(f"Unknown size field '{field_name}'")
        value = inputs.parse_size_text(text, self.settings.size)
        return self._apply(with_size(self.config, **{field_name: value}))

    def set_feature(self, key: str, **changes) -> PricingResult:
        """Edit one feature entry (enabled, quantity, price_per_unit, days_per_unit, name)."""
        if 'quantity' in changes:
            changes['quantity'] = inputs.parse_quantity(changes['quantity'])
        if 'price_per_unit' in changes:
            changes['price_per_unit'] = inputs.parse_price(changes['price_per_unit'])
        if 'days_per_unit' in changes:
            changes['days_per_unit'] = inputs.parse_days(changes['days_per_unit'])
        if 'name' in changes and not self.config.get_feature(key).is_custom:
            raise ValueError(f"Only the custom feature can be renamed, not '{key}'")
        return self._apply(with_feature(self.config, key, **changes))

    def set_delivery_days(self, days) -> PricingResult:
        """Choose a delivery time (adjustable delivery model); None resets to the estimate."""
        if days is not None:
            days = inputs.clamp_delivery_days(days, self.settings.delivery)
        return self._apply(with_delivery_days(self.config, days))

    def reset(self) -> PricingResult:
        """Back to catalog defaults. The order counter keeps counting."""
        return self._apply(self.catalog.default_config(self.settings))

    def summarize(self, order_number: int) -> OrderSummary:
        return OrderSummary.from_quote(order_number, self.config, self.result)

    def confirm_order(self) -> OrderSummary:
        """
        Number and summarize the current quote.

        Raises:
            ValueError: the current result is not a valid quote
        """
        if not self.result.is_valid:
            raise ValueError("Cannot confirm an order without a valid quote")
        return self.summarize(self.sequence.next())
