from __future__ import annotations

"""
Decide whether a geocoder result plausibly belongs to the target commune.

Two independent tests are OR-ed together:

* bounding box, expanded by a small tolerance on every side (vacuously
  true when the commune has no usable box);
* administrative text: city name, BAN context string, or postcode prefix.

The combination favours recall; ranking downstream pushes weak matches
down rather than this filter throwing them away.
"""

from typing import Optional, Sequence

from . import config
from .normalize import normalize_text
from .pipeline_types import CommuneGeoContext, GeoCandidate, parse_bbox


def is_within_bbox(
    latitude: float,
    longitude: float,
    bbox: Optional[Sequence[float]],
    tolerance: float = config.COORDINATE_TOLERANCE,
) -> bool:
    box = parse_bbox(bbox)
    if box is None:
        return True
    south, north, west, east = box
    return (
        south - tolerance <= latitude <= north + tolerance
        and west - tolerance <= longitude <= east + tolerance
    )


def _matches_admin_text(candidate: GeoCandidate, geo: CommuneGeoContext) -> bool:
    commune = normalize_text(geo.name)
    if commune:
        if normalize_text(candidate.city) == commune:
            return True

        # BAN context looks like "33, Gironde, Nouvelle-Aquitaine"
        context = normalize_text(candidate.context)
        if context and (context == commune or commune in context):
            return True

    postcode = (candidate.postcode or "").strip()
    if postcode:
        return any(code and postcode.startswith(code) for code in geo.postal_codes)
    return False


def matches_commune(candidate: GeoCandidate, geo: CommuneGeoContext) -> bool:
    if is_within_bbox(candidate.latitude, candidate.longitude, geo.bounding_box):
        return True
    return _matches_admin_text(candidate, geo)
