import math
import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from landscape_calculator.config.settings import PricingPolicy, Settings
from landscape_calculator.engine import OrderConfig, PricingEngine
from landscape_calculator.services.session import OrderSequence, OrderSummary, QuoteSession


@pytest.fixture(scope="function")
def session():
    return QuoteSession()


def test_session_starts_from_defaults(session):
    assert session.config.width == 1000
    assert session.config.length == 1000
    assert session.result.total_price == 30
    assert session.result.total_days == 5
    assert session.result.feature_lines == ()


def test_each_edit_recomputes(session):
    session.set_feature("villages", enabled=True)
    assert session.result.total_price == 70
    assert session.result.total_days == 7

    session.set_feature("villages", quantity="3")
    assert session.result.total_price == 30 + 120
    assert session.result.total_days == 5 + 6

    session.set_size(width=20000, length=20000)
    assert session.result.base_price == 620
    assert session.result.total_price == 620 + 120


def test_edit_replaces_config(session):
    before = session.config
    session.set_feature("custom_caves", enabled=True)

    assert session.config is not before
    assert before.get_feature("custom_caves").enabled is False


def test_typed_size_falls_back_to_minimum(session):
    session.set_size_text("width", "")
    assert session.config.width == 100

    session.set_size_text("length", "not a number")
    assert session.config.length == 100

    session.set_size_text("width", "50000")
    assert session.config.width == 35000
    assert session.result.is_valid


def test_unknown_size_field(session):
    with pytest.raises(ValueError):
        session.set_size_text("height", "1000")


def test_feature_field_coercion(session):
    session.set_feature("custom_feature", enabled=True, quantity="", price_per_unit="-5", days_per_unit="3")
    custom = session.config.get_feature("custom_feature")

    assert custom.quantity == 1
    assert custom.price_per_unit == 0.0
    assert custom.days_per_unit == 3
    assert session.result.total_days == 8


def test_only_custom_feature_can_be_renamed(session):
    session.set_feature("custom_feature", name="Pirate Cove")
    assert session.config.get_feature("custom_feature").name == "Pirate Cove"

    with pytest.raises(ValueError):
        session.set_feature("villages", name="Towns")


def test_unknown_feature(session):
    with pytest.raises(KeyError):
        session.set_feature("dragons", enabled=True)


def test_reset_keeps_order_counter(session):
    session.set_feature("villages", enabled=True)
    first = session.confirm_order()
    session.reset()

    assert session.config.get_feature("villages").enabled is False
    assert session.result.total_price == 30
    assert session.confirm_order().order_number == first.order_number + 1


def test_order_sequence_is_per_session():
    a = QuoteSession(sequence=OrderSequence(start=41))
    b = QuoteSession()

    assert a.confirm_order().order_number == 41
    assert a.confirm_order().order_number == 42
    assert b.confirm_order().order_number == 1


def test_order_summary_text(session):
    session.set_feature("villages", enabled=True)
    summary = session.confirm_order()

    assert summary.to_text() == "\n".join([
        "=== Minecraft Map Order #0001 ===",
        "Size: 1000x1000 blocks (3,969 chunks)",
        "Total Price: $70",
        "Delivery Time: 7 days",
        "Villages: $40",
    ])


def test_order_summary_uses_custom_name(session):
    session.set_feature("custom_feature", enabled=True, name="Pirate Cove", price_per_unit="12.5", quantity="2")
    text = session.confirm_order().to_text()

    assert "Pirate Cove: $25" in text
    assert "Total Price: $55" in text


def test_cannot_confirm_invalid_quote(session):
    session.result = session.engine.compute(OrderConfig(width=math.nan, length=1000))

    with pytest.raises(ValueError):
        session.confirm_order()
    assert session.sequence.peek() == 1


def test_adjustable_delivery_session():
    engine = PricingEngine(Settings.load(pricing=PricingPolicy(delivery_model='adjustable')))
    session = QuoteSession(engine=engine)

    session.set_delivery_days(2)
    assert session.result.total_days == 2
    assert session.result.total_price == 30 + 18

    session.set_delivery_days(500)
    assert session.config.delivery_days == 120
    assert session.result.total_price == 30

    session.set_delivery_days(None)
    assert session.result.total_days == 5


def test_summary_from_quote():
    engine = PricingEngine()
    config = OrderConfig(width=2000, length=500)
    summary = OrderSummary.from_quote(7, config, engine.compute(config))

    assert summary.order_id == "#0007"
    assert summary.chunks == 125 * 32


def test_summary_features_are_a_tuple():
    engine = PricingEngine()
    config = OrderConfig(width=1000, length=1000)
    summary = OrderSummary.from_quote(1, config, engine.compute(config))

    assert summary.features == ()


def test_blank_custom_name_is_listed_as_custom(session):
    session.set_feature("custom_feature", enabled=True, name="", price_per_unit="5")
    text = session.confirm_order().to_text()

    assert text.splitlines()[-1] == "Custom: $5"
