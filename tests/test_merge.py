from address_suggest.merge import merge_suggestions
from address_suggest.pipeline_types import AddressSuggestion


def _s(id_, label=None, origin="primary"):
    return AddressSuggestion(
        id=id_, label=label or f"label {id_}", name=label or f"label {id_}",
        latitude=48.85, longitude=2.33, origin=origin,
    )


def test_merge_removes_shared_id_and_keeps_base_order():
    base = [_s("a"), _s("b"), _s("c")]
    additional = [_s("d", origin="fallback"), _s("b", origin="fallback"), _s("e", origin="fallback")]

    merged = merge_suggestions(base, additional)

    assert len(merged) == len(base) + len(additional) - 1
    assert [s.id for s in merged] == ["a", "b", "c", "d", "e"]
    # the base copy wins
    assert merged[1].origin == "primary"


def test_merge_with_empty_additional_returns_base_itself():
    base = [_s("a")]
    assert merge_suggestions(base, []) is base


def test_merge_falls_back_to_label_when_id_is_empty():
    base = [_s("", label="Place de la Mairie")]
    additional = [_s("", label="Place de la Mairie"), _s("", label="Rue Neuve")]
    merged = merge_suggestions(base, additional)
    assert [s.label for s in merged] == ["Place de la Mairie", "Rue Neuve"]


def test_merge_dedups_within_additional():
    merged = merge_suggestions([], [_s("x"), _s("x"), _s("y")])
    assert [s.id for s in merged] == ["x", "y"]
