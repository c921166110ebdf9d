from pydantic import AliasChoices, BaseModel, Field
from typing import Optional, Dict, Any


def _rate(*aliases, le=None):
    """Optional non-negative rate field accepting snake_case and stored camelCase names."""
    return Field(None, ge=0, le=le, validation_alias=AliasChoices(*aliases))


# Numeric fields shared by job overrides, templates, business profiles and trade
# defaults, in display order. Markup is resolved through its own chain.
RATE_FIELDS = (
    "hourly_rate",
    "helper_hourly_rate",
    "day_rate",
    "callout_fee",
    "min_charge",
    "rate_per_m2_interior",
    "rate_per_m2_exterior",
    "rate_per_lm_trim",
)


class BaseRates(BaseModel):
    """The per-unit rates every layer can carry. Business profiles stop here."""
    hourly_rate: Optional[float] = _rate("hourly_rate", "hourlyRate")
    helper_hourly_rate: Optional[float] = _rate("helper_hourly_rate", "helperHourlyRate")
    day_rate: Optional[float] = _rate("day_rate", "dayRate")
    callout_fee: Optional[float] = _rate("callout_fee", "calloutFee")
    min_charge: Optional[float] = _rate("min_charge", "minCharge")
    rate_per_m2_interior: Optional[float] = _rate("rate_per_m2_interior", "ratePerM2Interior")
    rate_per_m2_exterior: Optional[float] = _rate("rate_per_m2_exterior", "ratePerM2Exterior")
    rate_per_lm_trim: Optional[float] = _rate("rate_per_lm_trim", "ratePerLmTrim")

    class Config:
        populate_by_name = True


class RateFields(BaseRates):
    # No upper bound on markup
    material_markup_percent: Optional[float] = _rate(
        "material_markup_percent", "materialMarkupPercent",
    )


class JobRates(RateFields):
    """Rate overrides stored directly on a job. Empty is valid."""
    # The jobs table still stores labour/helper rates under their legacy names
    hourly_rate: Optional[float] = _rate("hourly_rate", "hourlyRate", "labourRatePerHour")
    helper_hourly_rate: Optional[float] = _rate(
        "helper_hourly_rate", "helperHourlyRate", "helperRatePerHour",
    )
    rate_template_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("rate_template_id", "rateTemplateId"),
    )
    trade_type: Optional[str] = Field(
        None, validation_alias=AliasChoices("trade_type", "tradeType"),
    )


class RateTemplate(RateFields):
    id: Optional[str] = None
    user_id: Optional[str] = Field(None, validation_alias=AliasChoices("user_id", "userId"))
    name: str = ""
    trade_type: Optional[str] = Field(None, validation_alias=AliasChoices("trade_type", "tradeType"))
    property_type: Optional[str] = Field(
        None, validation_alias=AliasChoices("property_type", "propertyType"),
    )
    is_default: bool = Field(False, validation_alias=AliasChoices("is_default", "isDefault"))


class BusinessProfile(BaseRates):
    """A user's standing default rates plus business-wide settings."""
    gst_registered: bool = Field(
        False, validation_alias=AliasChoices("gst_registered", "gstRegistered"),
    )
    default_margin_pct: Optional[float] = _rate("default_margin_pct", "defaultMarginPct", le=100)
    default_deposit_pct: Optional[float] = _rate("default_deposit_pct", "defaultDepositPct", le=100)
    default_payment_terms: Optional[str] = Field(
        None, max_length=100,
        validation_alias=AliasChoices("default_payment_terms", "defaultPaymentTerms"),
    )
    trade_rates_json: Optional[str] = Field(
        None, validation_alias=AliasChoices("trade_rates_json", "tradeRatesJson"),
    )


class UserPreferences(BaseModel):
    """Simple per-user pricing preferences held in the key-value store."""
    material_markup_percent: Optional[float] = _rate(
        "material_markup_percent", "materialMarkupPercent",
    )
    hourly_rate: Optional[float] = _rate("hourly_rate", "hourlyRate")
    day_rate: Optional[float] = _rate("day_rate", "dayRate")
    rough_estimate_only: Optional[bool] = Field(
        None, validation_alias=AliasChoices("rough_estimate_only", "roughEstimateOnly"),
    )

    class Config:
        populate_by_name = True


class EffectiveRates(RateFields):
    """
    The resolved pricing parameters for one job.

    A field left as None means no layer configured it; quote generation must
    omit that line item rather than charge zero.
    """
    gst_registered: Optional[bool] = None
    default_margin_pct: Optional[float] = None
    default_deposit_pct: Optional[float] = None
    default_payment_terms: Optional[str] = None
    trade_rates: Optional[Dict[str, Any]] = None
    sources: Dict[str, str] = {}

    def to_dict(self) -> dict:
        """Resolved values only — unset fields are left out entirely."""
        return self.model_dump(exclude_none=True)


class EstimateRange(BaseModel):
    base_total: Optional[float] = None
    low_estimate: Optional[float] = None
    high_estimate: Optional[float] = None
    formatted_range: str = "N/A"

    @classmethod
    def unavailable(cls) -> "EstimateRange":
        return cls()
