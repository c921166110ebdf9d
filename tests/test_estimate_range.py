"""
Estimate range tests — currency scanning, the five derivation outcomes, banding.
"""

import json

import pytest

from tradie_rates.estimate_range import (
    NoMatch, Pair, Single, Unparseable,
    band, derive_range, parse_amount, parse_quote, round_half_up, scan_currency,
)
from tradie_rates.schemas import EstimateRange


def _quote(total=None, labour=None, materials=None):
    quote = {}
    if total is not None:
        quote["totalEstimate"] = {"totalJobEstimate": total}
    if labour is not None:
        quote["labour"] = {"total": labour}
    if materials is not None:
        quote["materials"] = {"totalMaterialsCost": materials}
    return json.dumps(quote)


# --- Currency scan ---

def test_scan_single_amount():
    assert scan_currency("$1,385.50") == Single(1385.5)


def test_scan_pair():
    assert scan_currency("$1,350 - $1,550") == Pair(1350.0, 1550.0)


def test_scan_ignores_amounts_past_the_second():
    assert scan_currency("$1,000 - $1,200 (approx $1,100)") == Pair(1000.0, 1200.0)


def test_scan_no_currency():
    assert scan_currency("To be confirmed on site") == NoMatch()


@pytest.mark.parametrize("text", [None, "", "   ", 1385])
def test_scan_unparseable(text):
    assert isinstance(scan_currency(text), Unparseable)


@pytest.mark.parametrize("text,expected", [
    ("$1,385.50", 1385.5),
    ("€ 900", 900.0),
    ("1200", 1200.0),
    (450, 450.0),
    ("about twelve hundred", None),
    (None, None),
    (True, None),
])
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


def test_parse_quote_wraps_free_text():
    assert parse_quote("Roughly $2,000") == {"totalEstimate": {"totalJobEstimate": "Roughly $2,000"}}
    assert parse_quote(None) is None
    assert parse_quote("") is None


# --- Derivation outcomes ---

def test_none_quote_is_unavailable():
    result = derive_range(None)
    assert result == EstimateRange(
        base_total=None, low_estimate=None, high_estimate=None, formatted_range="N/A",
    )


def test_range_is_averaged_and_rebanded():
    result = derive_range('{"totalEstimate":{"totalJobEstimate":"$1,350 - $1,550"}}')
    assert result.base_total == 1450
    assert result.low_estimate == 1380
    assert result.high_estimate == 1600
    assert result.formatted_range == "$1,380 – $1,600"


def test_single_value():
    result = derive_range('{"totalEstimate":{"totalJobEstimate":"$1,385.50"}}')
    assert result.base_total == 1385.5
    assert result.low_estimate == 1320
    assert result.high_estimate == 1520
    assert result.formatted_range == "$1,320 – $1,520"


def test_pair_within_tolerance_uses_first_value():
    result = derive_range(_quote(total="$1,385.50 – $1,385.50"))
    assert result.base_total == 1385.5


def test_summed_fallback_when_total_has_no_amount():
    result = derive_range(_quote(total="TBC", labour="$800", materials="$450.00"))
    assert result.base_total == 1250
    assert result.low_estimate == 1190
    assert result.high_estimate == 1380


def test_summed_fallback_materials_only():
    result = derive_range(_quote(materials="$300"))
    assert result.base_total == 300
    assert (result.low_estimate, result.high_estimate) == (290, 330)


def test_free_text_quote():
    result = derive_range("Approx $2,000 inc GST")
    assert result.base_total == 2000
    assert (result.low_estimate, result.high_estimate) == (1900, 2200)


def test_free_text_without_amount_is_unavailable():
    assert derive_range("Call me to discuss") == EstimateRange.unavailable()


@pytest.mark.parametrize("quote_text", [
    _quote(total="$0"),
    _quote(labour="$0", materials="$0"),
    _quote(labour="N/A"),
    '{"totalEstimate": 5}',
    '{"totalEstimate": {"totalJobEstimate": null}}',
    "[]",
    "{}",
])
def test_non_positive_or_missing_basis_is_unavailable(quote_text):
    result = derive_range(quote_text)
    assert result.base_total is None
    assert result.low_estimate is None
    assert result.high_estimate is None
    assert result.formatted_range == "N/A"


def test_collapsed_band_uses_fixed_width():
    """$40 rounds to $40–$40; fall back to base ± $50, floored at zero."""
    result = derive_range(_quote(total="$40"))
    assert result.base_total == 40
    assert (result.low_estimate, result.high_estimate) == (0, 90)
    assert result.formatted_range == "$0 – $90"


def test_derive_range_is_idempotent():
    text = _quote(total="$1,350 - $1,550")
    assert derive_range(text) == derive_range(text)


# --- Banding ---

@pytest.mark.parametrize("base_total", [0.01, 1, 9.99, 40, 55, 100, 999.5, 1385.5, 25000, 1234567.89])
def test_band_low_below_high(base_total):
    low, high = band(base_total)
    assert 0 <= low < high


def test_round_half_up():
    assert round_half_up(1377.5, 10) == 1380
    assert round_half_up(1595, 10) == 1600
    assert round_half_up(1374.99, 10) == 1370
    assert round_half_up(-9.5) == -9


# --- Hostile input ---

def test_deeply_nested_json_is_read_as_free_text():
    assert derive_range("[" * 100000) == EstimateRange.unavailable()
    assert derive_range('{"a":' * 100000 + " $1,000") == derive_range("{ $1,000")


def test_total_too_large_to_band_is_unavailable():
    huge = "$17" + "0" * 307
    assert derive_range(_quote(total=huge)) == EstimateRange.unavailable()


def test_pair_mean_overflow_is_unavailable():
    huge = "$17" + "0" * 307
    other = "$16" + "0" * 307
    assert derive_range(_quote(total=f"{huge} - {other}")) == EstimateRange.unavailable()


def test_summed_overflow_is_unavailable():
    huge = "$17" + "0" * 307
    assert derive_range(_quote(labour=huge, materials=huge)) == EstimateRange.unavailable()
