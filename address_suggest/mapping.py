from __future__ import annotations
"""
Mapping utilities to convert raw BAN features into suggestions, and
suggestions into API responses.

Feature validation is an explicit step: `parse_feature` either yields a
`ParsedFeature` or None, and a None is simply dropped (never an error).
The public response never carries the internal `origin` tag.
"""

from typing import Any, Iterable, List, Optional

from loguru import logger

from .config import AddressSuggestionItem, SuggestResponse
from .containment import matches_commune
from .pipeline_types import (
    AddressSuggestion,
    CommuneGeoContext,
    Origin,
    ParsedFeature,
    finite_number,
)


def _optional_str(val: Any) -> Optional[str]:
    """Provider string fields, with empties and non-scalars mapped to None."""
    if val is None or isinstance(val, (dict, list, bool)):
        return None
    s = str(val)
    return s if s.strip() else None


def parse_feature(feature: Any) -> Optional[ParsedFeature]:
    """Validate one GeoJSON feature; None means 'discard'."""
    if not isinstance(feature, dict):
        return None

    geometry = feature.get("geometry") or {}
    coords = geometry.get("coordinates") if isinstance(geometry, dict) else None
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None
    lon, lat = finite_number(coords[0]), finite_number(coords[1])
    if lon is None or lat is None:
        return None

    props = feature.get("properties") or {}
    if not isinstance(props, dict):
        return None
    raw_label = props.get("label")
    label = raw_label.strip() if isinstance(raw_label, str) else ""
    if not label:
        return None

    raw_id = props.get("id")
    provider_id = None if raw_id in (None, "") or isinstance(raw_id, bool) else str(raw_id)

    return ParsedFeature(
        latitude=lat,
        longitude=lon,
        label=label,
        provider_id=provider_id,
        name=_optional_str(props.get("name")),
        postcode=_optional_str(props.get("postcode")),
        city=_optional_str(props.get("city")),
        context=_optional_str(props.get("context")),
    )


def to_suggestion(parsed: ParsedFeature, origin: Origin) -> AddressSuggestion:
    return AddressSuggestion(
        id=parsed.provider_id or f"{parsed.latitude},{parsed.longitude}",
        label=parsed.label,
        name=parsed.name or parsed.label,
        context=parsed.context,
        latitude=parsed.latitude,
        longitude=parsed.longitude,
        postcode=parsed.postcode,
        city=parsed.city,
        origin=origin,
    )


def map_features(
    features: Iterable[Any],
    geo: CommuneGeoContext,
    origin: Origin = "primary",
) -> List[AddressSuggestion]:
    """Usable, in-commune features as suggestions, in provider order."""
    out: List[AddressSuggestion] = []
    dropped_shape = dropped_geo = 0
    for feature in features or []:
        parsed = parse_feature(feature)
        if parsed is None:
            dropped_shape += 1
            continue
        if not matches_commune(parsed.as_candidate(), geo):
            dropped_geo += 1
            continue
        out.append(to_suggestion(parsed, origin))

    if dropped_shape or dropped_geo:
        logger.debug(
            "map_features({}): kept {}, dropped {} malformed / {} outside commune {}",
            origin, len(out), dropped_shape, dropped_geo, geo.id,
        )
    return out


def to_api_item(suggestion: AddressSuggestion) -> AddressSuggestionItem:
    return AddressSuggestionItem(
        id=suggestion.id,
        label=suggestion.label,
        name=suggestion.name,
        context=suggestion.context,
        latitude=suggestion.latitude,
        longitude=suggestion.longitude,
        postcode=suggestion.postcode,
        city=suggestion.city,
    )


def map_suggestions_to_response(suggestions: Iterable[AddressSuggestion]) -> SuggestResponse:
    return SuggestResponse(suggestions=[to_api_item(s) for s in suggestions])
