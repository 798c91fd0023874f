from dataclasses import replace

import pytest

from address_suggest import config
from address_suggest.cascade import (
    build_fallback_queries,
    build_primary_query,
    clamp_limit,
    has_meaningful_match,
    run_cascade,
)
from address_suggest.errors import GeocoderError, GeocoderUnavailableError
from address_suggest.pipeline_types import AddressSuggestion

from conftest import FakeBan, make_feature


def _s(label):
    return AddressSuggestion(id=label, label=label, name=label, latitude=48.85, longitude=2.33)


def test_clamp_limit():
    assert clamp_limit(None) == 7
    assert clamp_limit(0) == 1
    assert clamp_limit(3) == 3
    assert clamp_limit(50) == 10


def test_build_primary_query_appends_commune_name(springfield):
    assert build_primary_query("12 rue de la Paix", springfield) == "12 rue de la Paix Springfield"


def test_build_fallback_queries_strip_accents_and_dedup(springfield):
    geo = replace(springfield, name="Saint-Émilion", postal_codes=("33330", "33331"))
    assert build_fallback_queries("église", geo) == [
        "eglise",
        "eglise Saint-Emilion",
        "eglise 33330",
    ]

    no_postcode = replace(springfield, postal_codes=())
    assert build_fallback_queries("mairie", no_postcode) == ["mairie", "mairie Springfield"]


def test_has_meaningful_match():
    tokens = ["12", "paix"]
    assert has_meaningful_match([_s("12 Rue de la Paix")], tokens)
    assert not has_meaningful_match([_s("14 Rue de la Paix")], tokens)
    # no significant token: any non-empty result is enough
    assert has_meaningful_match([_s("Rue X")], [])
    assert not has_meaningful_match([], [])


def test_primary_match_short_circuits_fallbacks(springfield):
    ban = FakeBan({
        "12 rue de la paix Springfield": [make_feature("12 Rue de la Paix 75000 Springfield")],
    })
    result = run_cascade("12 rue de la paix", springfield, ban, max_results=5)

    assert len(ban.calls) == 1
    assert ban.calls[0]["types"] == config.PRIMARY_RESULT_TYPES
    assert ban.calls[0]["limit"] == 5
    assert [s.label for s in result.suggestions] == ["12 Rue de la Paix 75000 Springfield"]
    assert result.tokens == ["12", "rue", "paix"]


def test_fallbacks_run_without_type_filter_and_merge_rounds(springfield):
    ban = FakeBan({
        "eglise saint": [make_feature("Rue de l'Église", id="r1")],
        "eglise saint Springfield": [make_feature("Église Saint-Pierre Springfield", id="e1")],
        "eglise saint 75000": [make_feature("never asked", id="x")],
    })
    result = run_cascade("église saint", springfield, ban)

    assert [c["q"] for c in ban.calls] == [
        "église saint Springfield",
        "eglise saint",
        "eglise saint Springfield",
    ]
    assert all(c["types"] is None for c in ban.calls[1:])
    assert [s.id for s in result.suggestions] == ["r1", "e1"]
    assert {s.origin for s in result.suggestions} == {"fallback"}



def test_fallback_stops_at_first_meaningful_round(springfield):
    ban = FakeBan({
        "mediatheque": [make_feature("Médiathèque de Springfield", id="m1")],
        "mediatheque Springfield": [make_feature("never asked", id="x")],
    })
    result = run_cascade("médiathèque", springfield, ban)

    assert result.attempts == ["médiathèque Springfield", "mediatheque"]
    assert len(ban.calls) == 2
    assert [s.id for s in result.suggestions] == ["m1"]
    assert [s.origin for s in result.suggestions] == ["fallback"]


def test_failing_fallback_does_not_abort_cascade(springfield):
    ban = FakeBan({
        "theatre": GeocoderError("HTTP 503", status_code=503),
        "theatre Springfield": [make_feature("Théâtre municipal Springfield", id="t1")],
    })
    result = run_cascade("théâtre", springfield, ban)

    assert len(ban.calls) == 3
    assert [s.id for s in result.suggestions] == ["t1"]


def test_all_fallbacks_tried_when_nothing_matches(springfield):
    ban = FakeBan({
        # primary and second fallback share the same query string
        "stade olympique Springfield": [make_feature("Rue du Stade", id="s0")],
        "stade olympique": [make_feature("Rue du Stade", id="s0"), make_feature("Allée du Stade", id="s1")],
    })
    result = run_cascade("stade olympique", springfield, ban)

    assert len(ban.calls) == 4
    assert [s.id for s in result.suggestions] == ["s0", "s1"]
    assert [s.origin for s in result.suggestions] == ["primary", "fallback"]



def test_primary_failure_is_fatal_and_skips_fallbacks(springfield):
    ban = FakeBan({"rue Springfield": GeocoderError("HTTP 500", status_code=500)})
    with pytest.raises(GeocoderUnavailableError):
        run_cascade("rue", springfield, ban)
    assert len(ban.calls) == 1


def test_fallback_postcode_query_uses_first_code_of_combined_field(springfield):
    geo = replace(springfield, postal_codes=("33360; 33370",))
    assert build_fallback_queries("mairie", geo)[-1] == "mairie 33360"
