"""
Rate Resolver — merges the rate layers into one EffectiveRates record.

Precedence per field: job override > rate template > business profile >
hard-coded trade default. Each field is resolved independently, so a job can
take its hourly rate from the template and its callout fee from itself.

Material markup has its own chain (job/template markup > business margin >
user markup preference) and never falls back to a hidden default.

Pure function of already-loaded records — no store access, never raises.
"""

import json
import logging
from typing import Any, Optional, Sequence

from .rate_sources import (
    JOB, PREFERENCE, PROFILE, TEMPLATE,
    RateSource, build_chain, coerce_record,
)
from .schemas import (
    RATE_FIELDS, BusinessProfile, EffectiveRates, UserPreferences,
)

logger = logging.getLogger(__name__)

MARKUP_FIELD = "material_markup_percent"


def first_present(sources: Sequence[RateSource], field: str) -> tuple[Any, Optional[str]]:
    """Value of the first layer that sets field, with that layer's name."""
    for source in sources:
        value = source.get(field)
        if value is not None:
            return value, source.name
    return None, None


def parse_trade_rates(raw: Optional[str]) -> Optional[dict]:
    """Persisted trade sub-rate blob. Anything but a JSON object degrades to None."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        logger.debug("Unparseable trade rates JSON: %s", e)
        return None
    if not isinstance(parsed, dict):
        logger.debug("Trade rates JSON is %s, expected object", type(parsed).__name__)
        return None
    return parsed


class RateResolver:
    """
    Resolves the effective rates for one job.

    Usage:
        rates = RateResolver().resolve(job, template, profile, preferences)
    """

    def resolve(self, job, rate_template=None, business_profile=None,
                preferences=None) -> EffectiveRates:
        """
        Args:
            job: job record or mapping (may be empty)
            rate_template: the job's linked template, or None
            business_profile: owner's profile, or None if it failed to load
            preferences: owner's key-value pricing preferences, or None

        Returns:
            EffectiveRates — unset fields mean "omit from quote"
        """
        chain = build_chain(job, rate_template, business_profile)
        job_layer, template_layer, profile_layer, _ = chain

        self._check_template_link(job_layer, template_layer)

        values = {}
        sources = {}
        for field in RATE_FIELDS:
            value, source = first_present(chain, field)
            if source is not None:
                values[field] = value
                sources[field] = source

        profile = profile_layer.record
        if profile is not None:
            values.update(
                gst_registered=profile.gst_registered,
                default_margin_pct=profile.default_margin_pct,
                default_deposit_pct=profile.default_deposit_pct,
                default_payment_terms=profile.default_payment_terms,
                trade_rates=parse_trade_rates(profile.trade_rates_json),
            )

        merged_markup, markup_source = first_present([job_layer, template_layer], MARKUP_FIELD)
        markup, markup_source = self.resolve_material_markup(
            merged_markup, profile, preferences, merged_source=markup_source,
        )
        if markup is not None:
            values[MARKUP_FIELD] = markup
            sources[MARKUP_FIELD] = markup_source

        return EffectiveRates(sources=sources, **values)

    def resolve_material_markup(self, merged_markup, business_profile=None,
                                preferences=None, merged_source: str = TEMPLATE):
        """
        Markup chain: merged job/template markup > profile default margin >
        user markup preference. Returns (value, source); (None, None) means
        materials are charged at cost.
        """
        if merged_markup is not None:
            return merged_markup, merged_source or TEMPLATE

        profile = coerce_record(BusinessProfile, business_profile)
        if profile is not None and profile.default_margin_pct is not None:
            return profile.default_margin_pct, PROFILE

        prefs = coerce_record(UserPreferences, preferences)
        if prefs is not None and prefs.material_markup_percent is not None:
            return prefs.material_markup_percent, PREFERENCE

        return None, None

    @staticmethod
    def _check_template_link(job_layer: RateSource, template_layer: RateSource):
        linked_id = job_layer.get("rate_template_id")
        template_id = template_layer.get("id")
        if linked_id and template_id and linked_id != template_id:
            logger.warning(
                "Job links rate template %s but template %s was supplied — using supplied template",
                linked_id, template_id,
            )


_resolver = RateResolver()


def resolve_effective_rates(job, rate_template=None, business_profile=None,
                            preferences=None) -> EffectiveRates:
    return _resolver.resolve(job, rate_template, business_profile, preferences)


def resolve_material_markup(rates: EffectiveRates, business_profile=None, preferences=None):
    """Markup for an already-merged EffectiveRates record; see RateResolver.resolve_material_markup."""
    source = rates.sources.get(MARKUP_FIELD, TEMPLATE) if rates.material_markup_percent is not None else None
    if source in (PROFILE, PREFERENCE):
        # already resolved past the job/template layer; re-run the lower links
        return _resolver.resolve_material_markup(None, business_profile, preferences)
    return _resolver.resolve_material_markup(
        rates.material_markup_percent, business_profile, preferences, merged_source=source,
    )
