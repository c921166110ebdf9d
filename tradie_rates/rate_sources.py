"""
Rate sources — the candidate layers the resolver merges.

Each layer wraps one already-loaded record (job overrides, rate template,
business profile, trade defaults) behind the same get(field) accessor.
A missing record is a valid, empty layer.
"""

import logging
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import AliasChoices, BaseModel, ValidationError

from .schemas import BusinessProfile, JobRates, RateTemplate
from .trade_defaults import get_trade_defaults

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

JOB = "job"
TEMPLATE = "template"
PROFILE = "profile"
TRADE_DEFAULT = "trade_default"
PREFERENCE = "preference"


class RateSource:
    """One named layer in the precedence chain."""

    def __init__(self, name: str, record: Optional[BaseModel]):
        self.name = name
        self.record = record

    def get(self, field: str) -> Any:
        if self.record is None:
            return None
        return getattr(self.record, field, None)

    def __repr__(self):
        return f"RateSource({self.name!r}, present={self.record is not None})"


def _field_keys(model: Type[BaseModel], key) -> set:
    """Every input key that populates the same field as key (name plus aliases)."""
    for name, info in model.model_fields.items():
        keys = {name}
        alias = info.validation_alias
        if isinstance(alias, AliasChoices):
            keys.update(choice for choice in alias.choices if isinstance(choice, str))
        elif isinstance(alias, str):
            keys.add(alias)
        if key in keys:
            return keys
    return {key}


def coerce_record(model: Type[M], data: Union[M, Mapping, None]) -> Optional[M]:
    """
    Accept a model instance, a raw mapping (camelCase or snake_case) or None.

    Invalid fields are dropped one by one and the rest of the record kept, so
    a bad payment-terms string doesn't take the profile's rates with it. Only
    input that isn't a record at all is treated as a missing layer.
    """
    if data is None:
        return None
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    if not isinstance(data, Mapping):
        logger.warning("Ignoring %s record of type %s", model.__name__, type(data).__name__)
        return None

    data = dict(data)
    while True:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            dropped = set()
            for error in e.errors():
                if not error["loc"]:
                    continue
                for key in _field_keys(model, error["loc"][0]) & set(data):
                    logger.warning(
                        "Dropping invalid %s field %s=%r: %s",
                        model.__name__, key, data[key], error["msg"],
                    )
                    dropped.add(key)
            if not dropped:
                logger.warning("Ignoring invalid %s record: %s", model.__name__, e)
                return None
            for key in dropped:
                del data[key]


def job_source(job) -> RateSource:
    return RateSource(JOB, coerce_record(JobRates, job))


def template_source(template) -> RateSource:
    return RateSource(TEMPLATE, coerce_record(RateTemplate, template))


def profile_source(profile) -> RateSource:
    return RateSource(PROFILE, coerce_record(BusinessProfile, profile))


def trade_default_source(trade_type: Optional[str]) -> RateSource:
    return RateSource(TRADE_DEFAULT, get_trade_defaults(trade_type))


def build_chain(job, template=None, profile=None) -> list[RateSource]:
    """
    Ordered precedence list: job > template > profile > trade default.

    The trade used for hard-coded defaults comes from the job, falling back
    to the template's trade.
    """
    job_layer = job_source(job)
    template_layer = template_source(template)
    trade_type = job_layer.get("trade_type") or template_layer.get("trade_type")
    return [
        job_layer,
        template_layer,
        profile_source(profile),
        trade_default_source(trade_type),
    ]
