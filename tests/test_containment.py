from dataclasses import replace

from address_suggest.containment import is_within_bbox, matches_commune
from address_suggest.pipeline_types import GeoCandidate


def test_bbox_tolerance_boundary(springfield):
    south = springfield.bounding_box[0]
    inside = GeoCandidate(latitude=south - 0.01, longitude=2.30)
    outside = GeoCandidate(latitude=south - 0.011, longitude=2.30)

    assert matches_commune(inside, springfield)
    assert not matches_commune(outside, springfield)


def test_bbox_missing_or_malformed_never_rejects():
    assert is_within_bbox(0.0, 0.0, None)
    assert is_within_bbox(0.0, 0.0, [1.0, 2.0, 3.0])
    assert is_within_bbox(0.0, 0.0, [1.0, float("nan"), 3.0, 4.0])
    assert is_within_bbox(0.0, 0.0, ["a", "b", "c", "d"])


def test_no_bbox_accepts_anything(springfield):
    geo = replace(springfield, bounding_box=None)
    assert matches_commune(GeoCandidate(latitude=-33.0, longitude=151.0), geo)


def test_city_name_rescues_point_outside_box(springfield):
    far = GeoCandidate(latitude=10.0, longitude=10.0, city="SPRÎNGFIELD")
    assert matches_commune(far, springfield)


def test_context_substring_rescues_point_outside_box(springfield):
    far = GeoCandidate(latitude=10.0, longitude=10.0, context="75, Springfield, Île-de-France")
    assert matches_commune(far, springfield)


def test_postcode_prefix_rescues_point_outside_box(springfield):
    geo = replace(springfield, postal_codes=("750", "92100"))
    assert matches_commune(GeoCandidate(latitude=10.0, longitude=10.0, postcode="75008"), geo)
    assert not matches_commune(GeoCandidate(latitude=10.0, longitude=10.0, postcode="69001"), geo)


def test_other_city_outside_box_is_rejected(springfield):
    far = GeoCandidate(latitude=10.0, longitude=10.0, city="Shelbyville", postcode="12345")
    assert not matches_commune(far, springfield)


def test_postcode_entries_stored_together_are_split(springfield):
    geo = replace(springfield, postal_codes=("33360, 75000",))
    assert geo.postal_codes == ("33360", "75000")
    assert geo.first_postal_code == "33360"
    assert matches_commune(GeoCandidate(latitude=10.0, longitude=10.0, postcode="75000"), geo)


def test_postcode_prefix_applies_without_commune_name(springfield):
    geo = replace(springfield, name="", postal_codes=("750",))
    assert matches_commune(GeoCandidate(latitude=10.0, longitude=10.0, postcode="75008"), geo)
