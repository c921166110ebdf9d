"""
Estimate Range Deriver — turns a stored AI quote into a low/high display band.

The quote text is usually a JSON object with currency strings under
labour.total, materials.totalMaterialsCost and totalEstimate.totalJobEstimate,
but free text with embedded amounts is accepted too.

Outcomes, checked in order:
    no-data          nothing usable → N/A
    single-value     one amount in the total estimate
    range-averaged   two different amounts → their mean
    summed-fallback  labour total + materials total
    banded-result    base total → rounded 5% below / 10% above

Pure function of the text — never raises.
"""

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Optional, Union

from .config import settings
from .formatters import format_range
from .schemas import EstimateRange

logger = logging.getLogger(__name__)

LOW_FACTOR = settings.ESTIMATE_LOW_FACTOR
HIGH_FACTOR = settings.ESTIMATE_HIGH_FACTOR
ROUND_TO = settings.ESTIMATE_ROUND_TO
FALLBACK_SPREAD = settings.ESTIMATE_FALLBACK_SPREAD
PAIR_TOLERANCE = settings.ESTIMATE_PAIR_TOLERANCE

# Symbol, digits with optional thousands separators, optional decimals: "$1,385.50", "€ 900"
CURRENCY_RE = re.compile(r"[$£€¥]\s?\d[\d,]*(?:\.\d+)?")
_STRIP_RE = re.compile(r"[$£€¥,\s]")


# --- Tagged currency scan result ---

@dataclass(frozen=True)
class NoMatch:
    pass


@dataclass(frozen=True)
class Single:
    value: float


@dataclass(frozen=True)
class Pair:
    first: float
    second: float


@dataclass(frozen=True)
class Unparseable:
    reason: str = ""


ScanResult = Union[NoMatch, Single, Pair, Unparseable]


def parse_amount(text) -> Optional[float]:
    """'$1,385.50' → 1385.5. None for anything that isn't a number."""
    if isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        return float(text) if math.isfinite(text) else None
    if not isinstance(text, str):
        return None
    cleaned = _STRIP_RE.sub("", text)
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def scan_currency(text) -> ScanResult:
    """
    Classify the currency amounts in a string.

    Only the first two amounts matter: a third is ignored, the same way a
    "low – high (approx. $X)" string is read as a range.
    """
    if not isinstance(text, str) or not text.strip():
        return Unparseable("empty or non-text total")

    amounts = []
    for match in CURRENCY_RE.findall(text)[:2]:
        value = parse_amount(match)
        if value is not None:
            amounts.append(value)

    if not amounts:
        return NoMatch()
    if len(amounts) == 1:
        return Single(amounts[0])
    return Pair(amounts[0], amounts[1])


def parse_quote(quote_text: Optional[str]) -> Optional[dict]:
    """
    The quote as a dict. Text that isn't a JSON object comes back as
    {"totalEstimate": {"totalJobEstimate": <text>}} so its amounts can still
    be scanned; there is no labour/materials fallback for free text.
    """
    if not isinstance(quote_text, str) or not quote_text.strip():
        return None
    try:
        parsed = json.loads(quote_text)
    except (ValueError, RecursionError):
        parsed = None
    if isinstance(parsed, dict):
        return parsed
    return {"totalEstimate": {"totalJobEstimate": quote_text}}


def _section_value(quote: dict, section: str, key: str):
    block = quote.get(section)
    if not isinstance(block, dict):
        return None
    return block.get(key)


def base_total_from_scan(scan: ScanResult) -> Optional[float]:
    """Single → that value; Pair → mean if the two differ by more than a rounding unit."""
    if isinstance(scan, Single):
        return scan.value
    if isinstance(scan, Pair):
        if abs(scan.first - scan.second) > PAIR_TOLERANCE:
            return (scan.first + scan.second) / 2
        return scan.first
    return None


def summed_cost_basis(quote: dict) -> Optional[float]:
    """labour.total + materials.totalMaterialsCost, or None if neither is positive."""
    labour = parse_amount(_section_value(quote, "labour", "total")) or 0.0
    materials = parse_amount(_section_value(quote, "materials", "totalMaterialsCost")) or 0.0
    if labour > 0 or materials > 0:
        return labour + materials
    return None


def round_half_up(value: float, step: int = 1) -> float:
    """Round to the nearest step, halves away from zero for positive values ($1,377.50 → $1,380)."""
    return math.floor(value / step + 0.5) * step


def band(base_total: float) -> tuple[float, float]:
    """Low/high display bounds for a positive base total. Always low < high."""
    low = round_half_up(base_total * LOW_FACTOR, ROUND_TO)
    high = round_half_up(base_total * HIGH_FACTOR, ROUND_TO)
    if low >= high:
        # Small totals collapse under rounding; use a fixed-width band instead
        low = max(0, round_half_up(base_total - FALLBACK_SPREAD))
        high = round_half_up(base_total + FALLBACK_SPREAD)
    return low, high


def derive_range(quote_text: Optional[str]) -> EstimateRange:
    """
    Display range for a stored quote.

    Args:
        quote_text: the persisted AI quote (JSON or free text), or None

    Returns:
        EstimateRange — EstimateRange.unavailable() when no positive total
        can be derived
    """
    quote = parse_quote(quote_text)
    if quote is None:
        return EstimateRange.unavailable()

    total_text = _section_value(quote, "totalEstimate", "totalJobEstimate")
    scan = scan_currency(total_text)
    base_total = base_total_from_scan(scan)

    if base_total is None:
        if isinstance(scan, Unparseable):
            logger.debug("No total estimate text in quote: %s", scan.reason)
        base_total = summed_cost_basis(quote)

    if base_total is None or base_total <= 0:
        return EstimateRange.unavailable()
    if not math.isfinite(base_total * HIGH_FACTOR):
        logger.debug("Quote total %r too large to band", base_total)
        return EstimateRange.unavailable()

    low, high = band(base_total)
    return EstimateRange(
        base_total=base_total,
        low_estimate=low,
        high_estimate=high,
        formatted_range=format_range(low, high),
    )
