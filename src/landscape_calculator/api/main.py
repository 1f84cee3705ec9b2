from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import math
from dataclasses import asdict
from typing import Dict, Optional
import sys
from pathlib import Path

# Add src to path for internal imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from landscape_calculator.engine import OrderConfig, PricingResult, with_size, with_feature, with_delivery_days
from landscape_calculator.services import inputs
from landscape_calculator.services.session import OrderSummary
from landscape_calculator.api.state import engine, catalog, settings, order_sequence

app = FastAPI(
    title="Landscape Calculator API",
    description="Price and delivery estimates for custom Minecraft maps",
    version="1.0.0"
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class FeatureSelection(BaseModel):
    enabled: bool = True
    quantity: int = 1
    price_per_unit: Optional[float] = None
    days_per_unit: Optional[float] = None
    name: Optional[str] = None


class QuoteRequest(BaseModel):
    width: float
    length: float
    features: Dict[str, FeatureSelection] = {}
    delivery_days: Optional[int] = None


def _json_safe(value):
    """Replace NaN/inf with None so the response stays valid JSON."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def build_config(req: QuoteRequest) -> OrderConfig:
    """Clamp the request and apply it to a fresh default configuration."""
    config = with_size(
        catalog.default_config(settings),
        width=inputs.clamp_size(req.width, settings.size),
        length=inputs.clamp_size(req.length, settings.size),
    )

    for key, selection in req.features.items():
        if key not in catalog:
            raise HTTPException(status_code=400, detail=f"Unknown feature '{key}'")

        changes = {
            'enabled': selection.enabled,
            'quantity': inputs.parse_quantity(selection.quantity),
        }
        if selection.price_per_unit is not None:
            changes['price_per_unit'] = inputs.parse_price(selection.price_per_unit)
        if selection.days_per_unit is not None:
            changes['days_per_unit'] = inputs.parse_days(selection.days_per_unit)
        if selection.name is not None:
            if catalog.get(key).group != 'custom':
                raise HTTPException(status_code=400, detail=f"Only the custom feature can be renamed, not '{key}'")
            changes['name'] = selection.name
        config = with_feature(config, key, **changes)

    if req.delivery_days is not None:
        config = with_delivery_days(config, inputs.clamp_delivery_days(req.delivery_days, settings.delivery))

    return config


def quote_response(config: OrderConfig, result: PricingResult) -> dict:
    return _json_safe({
        "width": config.width,
        "length": config.length,
        "delivery_days": config.delivery_days,
        "result": result.to_dict(),
        "trace_text": result.get_trace_text(),
    })


@app.get("/")
async def root():
    return {"status": "online", "message": "Landscape Calculator API Active"}


@app.get("/config")
async def get_config():
    return {
        "pricing": asdict(settings.pricing),
        "size": asdict(settings.size),
        "delivery": asdict(settings.delivery),
    }


@app.get("/features")
async def get_features():
    return {"features": catalog.to_records()}


@app.post("/quote")
async def calculate_quote(req: QuoteRequest):
    config = build_config(req)
    return quote_response(config, engine.compute(config))


@app.post("/orders")
async def confirm_order(req: QuoteRequest):
    config = build_config(req)
    result = engine.compute(config)
    if not result.is_valid:
        raise HTTPException(status_code=422, detail="Cannot confirm an order without a valid quote")

    summary = OrderSummary.from_quote(order_sequence.next(), config, result)
    response = quote_response(config, result)
    response.update({
        "order_number": summary.order_number,
        "order_id": summary.order_id,
        "summary": summary.to_text(),
    })
    return response
