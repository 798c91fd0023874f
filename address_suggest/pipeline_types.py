"""Typed containers shared across pipeline modules."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal, Optional, Sequence, Tuple

from .normalize import split_postal_codes

Origin = Literal["primary", "fallback"]
BoundingBox = Tuple[float, float, float, float]  # south, north, west, east


def finite_number(value) -> Optional[float]:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def parse_bbox(value) -> Optional[BoundingBox]:
    """Return ``(south, north, west, east)`` or None when the box is unusable."""
    if value is None or isinstance(value, (str, bytes)):
        return None
    try:
        items = list(value)
    except TypeError:
        return None
    if len(items) != 4:
        return None
    numbers = [finite_number(v) for v in items]
    if any(n is None for n in numbers):
        return None
    south, north, west, east = numbers
    return (south, north, west, east)


@dataclass(frozen=True)
class CommuneGeoContext:
    """Geographic description of the target commune for one matching call."""

    id: str
    name: str
    postal_codes: Tuple[str, ...] = ()
    bounding_box: Optional[BoundingBox] = None
    latitude: float = 0.0
    longitude: float = 0.0

    def __post_init__(self) -> None:
        # stored fields may hold "33360, 33370" in a single entry
        object.__setattr__(self, "postal_codes", tuple(split_postal_codes(self.postal_codes)))

    @property
    def first_postal_code(self) -> str:
        return self.postal_codes[0] if self.postal_codes else ""


@dataclass(frozen=True)
class GeoCandidate:
    """The subset of a provider result the containment filter looks at."""

    latitude: float
    longitude: float
    postcode: Optional[str] = None
    city: Optional[str] = None
    context: Optional[str] = None


@dataclass(frozen=True)
class ParsedFeature:
    """A provider feature that passed shape validation (coordinates + label)."""

    latitude: float
    longitude: float
    label: str
    provider_id: Optional[str] = None
    name: Optional[str] = None
    postcode: Optional[str] = None
    city: Optional[str] = None
    context: Optional[str] = None

    def as_candidate(self) -> GeoCandidate:
        return GeoCandidate(
            latitude=self.latitude,
            longitude=self.longitude,
            postcode=self.postcode,
            city=self.city,
            context=self.context,
        )


@dataclass(frozen=True)
class AddressSuggestion:
    id: str
    label: str
    name: str
    latitude: float
    longitude: float
    context: Optional[str] = None
    postcode: Optional[str] = None
    city: Optional[str] = None
    origin: Origin = "primary"


@dataclass(frozen=True)
class ScoredSuggestion:
    """Suggestion plus the relevance signals computed for the current query."""

    suggestion: AddressSuggestion
    token_matches: int
    score: float


@dataclass(frozen=True)
class CascadeResult:
    suggestions: Sequence[AddressSuggestion]
    tokens: Sequence[str]
    attempts: Sequence[str] = field(default_factory=tuple)
