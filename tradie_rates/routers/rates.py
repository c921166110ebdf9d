from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, Optional

from ..estimate_range import derive_range
from ..formatters import describe_rate_sources, format_effective_rates
from ..rate_resolver import resolve_effective_rates
from ..trade_defaults import default_rate_template, list_trades

router = APIRouter(prefix="/rates", tags=["rates"])


class ResolveRequest(BaseModel):
    # Raw records as loaded by the caller; camelCase or snake_case keys
    job: Dict[str, Any] = {}
    rate_template: Optional[Dict[str, Any]] = None
    business_profile: Optional[Dict[str, Any]] = None
    preferences: Optional[Dict[str, Any]] = None


class EstimateRangeRequest(BaseModel):
    quote_text: Optional[str] = None


@router.get("/trades")
def get_trades():
    return {"trades": list_trades()}


@router.get("/trades/{trade_type}/template")
def get_trade_template(trade_type: str):
    template = default_rate_template(trade_type)
    if template is None:
        raise HTTPException(status_code=404, detail=f"No default rates for trade '{trade_type}'")
    return template.model_dump()


@router.post("/resolve")
def resolve_rates(request: ResolveRequest):
    """Effective rates for one job from its already-loaded rate layers."""
    rates = resolve_effective_rates(
        request.job,
        request.rate_template,
        request.business_profile,
        request.preferences,
    )
    return {
        "rates": rates.to_dict(),
        "summary": format_effective_rates(rates),
        "sources_summary": describe_rate_sources(rates),
    }


@router.post("/estimate-range")
def estimate_range(request: EstimateRangeRequest):
    return derive_range(request.quote_text).model_dump()
