"""
Trade defaults — hard-coded fallback rates per trade.

Last layer of the rate precedence chain: used only when neither the job,
its rate template, nor the business profile configures a field.

Australian market rates 2024-2026. Per-m² and per-lm columns map each
trade's most common area/linear work onto the shared rate schema
(e.g. flooring interior = laminate labour only, roofing trim = gutters).
"""

from typing import Optional

from .schemas import RateFields, RateTemplate

TRADE_DEFAULT_RATES: dict[str, dict] = {
    "Plasterer": {
        "hourly_rate": 85, "helper_hourly_rate": 45, "day_rate": 650,
        "callout_fee": 85, "min_charge": 350,
        "rate_per_m2_interior": 28,   # new plasterboard, supply + fix
        "rate_per_m2_exterior": None,
        "rate_per_lm_trim": 12,       # cornice
        "material_markup_percent": 20,
    },
    "Carpenter": {
        "hourly_rate": 75, "helper_hourly_rate": 45, "day_rate": 580,
        "callout_fee": 95, "min_charge": 350,
        "rate_per_m2_interior": 75,   # timber flooring
        "rate_per_m2_exterior": 120,  # decking, supply + install
        "rate_per_lm_trim": 18,       # skirting
        "material_markup_percent": 25,
    },
    "Electrician": {
        "hourly_rate": 95, "helper_hourly_rate": 55, "day_rate": 750,
        "callout_fee": 120, "min_charge": 180,
        "rate_per_m2_interior": None,
        "rate_per_m2_exterior": None,
        "rate_per_lm_trim": None,
        "material_markup_percent": 30,
    },
    "Roofer": {
        "hourly_rate": 95, "helper_hourly_rate": 50, "day_rate": 750,
        "callout_fee": 150, "min_charge": 450,
        "rate_per_m2_interior": None,
        "rate_per_m2_exterior": 65,   # new Colorbond
        "rate_per_lm_trim": 45,       # gutter replacement
        "material_markup_percent": 25,
    },
    "Plumber": {
        "hourly_rate": 110, "helper_hourly_rate": 55, "day_rate": 850,
        "callout_fee": 120, "min_charge": 180,
        "rate_per_m2_interior": None,
        "rate_per_m2_exterior": None,
        "rate_per_lm_trim": 55,       # water pipe per metre
        "material_markup_percent": 30,
    },
    "Concreter": {
        "hourly_rate": 85, "helper_hourly_rate": 45, "day_rate": 650,
        "callout_fee": 150, "min_charge": 800,
        "rate_per_m2_interior": 80,   # garage floor slab
        "rate_per_m2_exterior": 95,   # driveway
        "rate_per_lm_trim": 35,       # edging
        "material_markup_percent": 20,
    },
    "HVAC": {
        "hourly_rate": 95, "helper_hourly_rate": 50, "day_rate": 750,
        "callout_fee": 120, "min_charge": 180,
        "rate_per_m2_interior": None,
        "rate_per_m2_exterior": None,
        "rate_per_lm_trim": 45,       # refrigerant pipework
        "material_markup_percent": 25,
    },
    "Flooring": {
        "hourly_rate": 70, "helper_hourly_rate": 45, "day_rate": 550,
        "callout_fee": 85, "min_charge": 450,
        "rate_per_m2_interior": 35,   # laminate, labour only
        "rate_per_m2_exterior": 35,   # LVP, labour only
        "rate_per_lm_trim": 18,       # skirting
        "material_markup_percent": 25,
    },
    "Landscaper": {
        "hourly_rate": 65, "helper_hourly_rate": 40, "day_rate": 500,
        "callout_fee": 85, "min_charge": 450,
        "rate_per_m2_interior": 28,   # turf, supply + install
        "rate_per_m2_exterior": 95,   # concrete pavers
        "rate_per_lm_trim": 45,       # steel edging
        "material_markup_percent": 30,
    },
    "Tiler": {
        "hourly_rate": 75, "helper_hourly_rate": 45, "day_rate": 580,
        "callout_fee": 85, "min_charge": 450,
        "rate_per_m2_interior": 50,   # standard wall tiles
        "rate_per_m2_exterior": 55,   # standard floor tiles
        "rate_per_lm_trim": 35,       # bullnose
        "material_markup_percent": 25,
    },
}

_BY_LOWER = {name.lower(): name for name in TRADE_DEFAULT_RATES}


def canonical_trade(trade_type: Optional[str]) -> Optional[str]:
    """Case-insensitive match to a trade with defaults, or None."""
    if not trade_type:
        return None
    return _BY_LOWER.get(trade_type.strip().lower())


def get_trade_defaults(trade_type: Optional[str]) -> Optional[RateFields]:
    """Hard-coded rates for a trade. Painter, Other and unknown trades have none."""
    trade = canonical_trade(trade_type)
    if trade is None:
        return None
    return RateFields(**TRADE_DEFAULT_RATES[trade])


def default_rate_template(trade_type: Optional[str], user_id: Optional[str] = None) -> Optional[RateTemplate]:
    """Starter template offered when a user picks a trade profile."""
    trade = canonical_trade(trade_type)
    if trade is None:
        return None
    return RateTemplate(
        name=f"{trade} - Standard Rates",
        user_id=user_id,
        trade_type=trade,
        is_default=True,
        **TRADE_DEFAULT_RATES[trade],
    )


def list_trades() -> list[str]:
    return sorted(TRADE_DEFAULT_RATES)
