"""
Display formatters for rates and estimate ranges.
"""

from typing import Optional

from .config import settings

RANGE_SEPARATOR = " – "

# (field, template) in display order for the rate summary line
RATE_SUMMARY_PARTS = [
    ("hourly_rate", "{amount}/hr"),
    ("rate_per_m2_interior", "{amount}/m² interior"),
    ("rate_per_m2_exterior", "{amount}/m² exterior"),
    ("rate_per_lm_trim", "{amount}/lm"),
    ("callout_fee", "{amount} callout"),
]

FIELD_LABELS = {
    "hourly_rate": "hourly rate",
    "helper_hourly_rate": "helper rate",
    "day_rate": "day rate",
    "callout_fee": "callout fee",
    "min_charge": "minimum charge",
    "rate_per_m2_interior": "interior m² rate",
    "rate_per_m2_exterior": "exterior m² rate",
    "rate_per_lm_trim": "trim lm rate",
    "material_markup_percent": "material markup",
}


def format_currency(value: Optional[float], decimals: int = 0) -> str:
    """1385.5 → '$1,386'. None → 'N/A'."""
    if value is None:
        return "N/A"
    symbol = settings.CURRENCY_SYMBOL
    sign = "-" if value < 0 else ""
    if decimals == 0:
        amount = f"{int(abs(value) + 0.5):,}"
    else:
        amount = f"{abs(value):,.{decimals}f}"
    return f"{sign}{symbol}{amount}"


def format_range(low: Optional[float], high: Optional[float]) -> str:
    if low is None or high is None:
        return "N/A"
    return f"{format_currency(low)}{RANGE_SEPARATOR}{format_currency(high)}"


def _rate_amount(value: float) -> str:
    # 85.0 → "$85", 27.5 → "$27.50"
    if float(value).is_integer():
        return format_currency(value)
    return format_currency(value, decimals=2)


def format_effective_rates(rates) -> str:
    """
    One-line summary of the rates a quote will use, e.g. '$85/hr, $28/m² interior'.

    Zero and unset rates are left out; with nothing to show the summary
    reads 'default rates'.
    """
    parts = []
    for field, template in RATE_SUMMARY_PARTS:
        value = getattr(rates, field, None)
        if value:
            parts.append(template.format(amount=_rate_amount(value)))
    if rates is not None and getattr(rates, "material_markup_percent", None):
        parts.append(f"{rates.material_markup_percent:g}% markup")
    return ", ".join(parts) if parts else "default rates"


def describe_rate_sources(rates) -> str:
    """'hourly rate: template, callout fee: profile' — where each resolved value came from."""
    sources = getattr(rates, "sources", None) or {}
    parts = [
        f"{FIELD_LABELS.get(field, field)}: {source}"
        for field, source in sources.items()
    ]
    return ", ".join(parts) if parts else "no rates configured"
