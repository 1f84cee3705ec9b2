"""
Streamlit UI for the Landscape Map Calculator.

Features:
- Map size sliders with snap points and typed input
- Feature rows (structures group, custom feature) with live totals
- Optional delivery-days slider for the adjustable delivery model
- Pricing trace and order summary export
"""
import streamlit as st
import pandas as pd
import sys
from dataclasses import asdict
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from landscape_calculator.engine import PricingEngine
from landscape_calculator.config.settings import get_settings
from landscape_calculator.data.feature_catalog import load_feature_catalog
from landscape_calculator.services.inputs import snap_size
from landscape_calculator.services.session import QuoteSession, OrderSequence, format_amount


st.set_page_config(
    page_title="Minecraft Landscape Map Calculator",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return PricingEngine()


@st.cache_resource
def get_catalog():
    """Get cached feature catalog."""
    return load_feature_catalog()


try:
    engine = get_engine()
    catalog = get_catalog()
    settings = get_settings()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


# The session (and its order counter) lives in Streamlit session state,
# one per browser session.
if 'quote_session' not in st.session_state:
    st.session_state.quote_session = QuoteSession(engine=engine, catalog=catalog, sequence=OrderSequence())
if 'last_order' not in st.session_state:
    st.session_state.last_order = None

session: QuoteSession = st.session_state.quote_session
bounds = settings.size


# ============================================================================
# SIDEBAR: Map Size
# ============================================================================
with st.sidebar:
    st.header("🗺️ Map Size")

    snap = st.toggle("Snap to common sizes", value=True)

    for field_name in ('width', 'length'):
        with st.container(border=True):
            current = int(getattr(session.config, field_name))
            slider_value = st.slider(
                field_name.capitalize(),
                min_value=int(bounds.min),
                max_value=int(bounds.max),
                value=current,
                step=50,
            )
            typed = st.text_input(
                f"{field_name.capitalize()} (blocks)",
                value=str(current),
            )

            if typed != str(current):
                session.set_size_text(field_name, typed)
            elif slider_value != current:
                value = slider_value
                if snap:
                    value = snap_size(value, bounds)
                session.set_size(**{field_name: value})

    st.caption(f"Allowed: {bounds.min:,} – {bounds.max:,} blocks per side")

    if settings.pricing.delivery_model == 'adjustable':
        st.divider()
        st.header("🚚 Delivery")
        delivery = settings.delivery
        chosen = session.config.delivery_days or int(session.result.total_days)
        days = st.slider("Delivery days", min_value=delivery.min, max_value=delivery.max, value=min(max(chosen, delivery.min), delivery.max))
        if days != chosen:
            session.set_delivery_days(days)


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Minecraft Landscape Map Calculator")

col1, col2 = st.columns([1.8, 1.2], gap="large")

with col1:
    st.subheader("Features")

    group_titles = {"": "Main Features", "structures": "Structures", "custom": "Custom Feature"}

    for group, specs in catalog.grouped().items():
        st.markdown(f"##### {group_titles.get(group, group.title())}")
        for spec in specs:
            feature = session.config.get_feature(spec.key)
            with st.container(border=True):
                c1, c2, c3, c4 = st.columns([2.2, 1, 1, 1])
                with c1:
                    enabled = st.checkbox(feature.name, value=feature.enabled, key=f"{spec.key}_enabled", help=spec.description)
                    if feature.is_custom:
                        name = st.text_input("Name", value=feature.name, key=f"{spec.key}_name", label_visibility="collapsed")
                        if name != feature.name:
                            session.set_feature(spec.key, name=name)
                with c2:
                    qty = st.number_input("Qty", min_value=1, value=int(feature.quantity), step=1, key=f"{spec.key}_qty", disabled=not enabled)
                with c3:
                    price = st.number_input("$/unit", min_value=0.0, value=float(feature.price_per_unit), key=f"{spec.key}_price", disabled=not enabled)
                with c4:
                    days = st.number_input("Days/unit", min_value=0, value=int(feature.days_per_unit), step=1, key=f"{spec.key}_days", disabled=not enabled)

                if enabled != feature.enabled:
                    session.set_feature(spec.key, enabled=enabled)
                if enabled and (qty != feature.quantity or price != feature.price_per_unit or days != feature.days_per_unit):
                    session.set_feature(spec.key, quantity=qty, price_per_unit=price, days_per_unit=days)

with col2:
    st.subheader("Quote Summary")
    result = session.result

    with st.container(border=True):
        if not result.is_valid:
            st.error("Cannot display a valid quote for this map size.")
        else:
            m1, m2 = st.columns(2)
            m1.metric("Total Price", f"${format_amount(result.total_price)}")
            m2.metric("Delivery", f"{format_amount(result.total_days)} days")

            st.divider()
            st.caption(f"**Area:** {result.area / 1_000_000:.2f}M blocks")
            st.caption(f"**Base Price:** ${format_amount(result.base_price)} | **Recommended:** {format_amount(result.recommended_days)} days")
            if result.price_adjustment:
                st.caption(f"**Delivery Adjustment:** ${format_amount(result.price_adjustment)}")

        for warning in result.warnings:
            st.warning(warning)

        if result.feature_lines:
            st.dataframe(
                pd.DataFrame([asdict(line) for line in result.feature_lines])[['name', 'quantity', 'price', 'days']],
                use_container_width=True,
                hide_index=True,
            )

        st.divider()

        btn_col1, btn_col2 = st.columns(2)
        with btn_col1:
            if st.button("✅ Confirm Order", type="primary", use_container_width=True, disabled=not result.is_valid):
                st.session_state.last_order = session.confirm_order()
        with btn_col2:
            if st.button("🗑️ Clear", use_container_width=True):
                session.reset()
                # Widgets keep their own state by key; drop it so they show the defaults
                for key in [k for k in st.session_state.keys() if k != 'quote_session']:
                    del st.session_state[key]
                st.rerun()

    if st.session_state.last_order is not None:
        order = st.session_state.last_order
        st.code(order.to_text(), language=None)
        st.download_button(
            "📥 Order Summary",
            data=order.to_text(),
            file_name=f"map_order_{order.order_number:04d}.txt",
            mime="text/plain",
            use_container_width=True,
        )

    with st.expander("🔍 Pricing Details"):
        st.text(result.get_trace_text())
