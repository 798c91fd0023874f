from __future__ import annotations
"""
Fallback cascade for commune-scoped address search.

Primary attempt = user query enriched with the commune name, restricted to
house numbers / streets / localities and biased toward the commune centroid.
If no primary suggestion contains every significant query token, a short
list of reformulated queries is tried one after the other (never in
parallel: each round decides whether the next one is needed).

    PRIMARY --(meaningful match)--> DONE
    PRIMARY --(no match)----------> FALLBACK(0) -> FALLBACK(1) -> ... -> DONE

A primary failure is fatal (GeocoderUnavailableError). A fallback failure
counts as an empty round and the cascade moves on.
"""

import enum
from typing import List, Optional, Sequence

from loguru import logger

from . import config
from .ban_client import BanClient
from .errors import GeocoderError, GeocoderUnavailableError
from .mapping import map_features
from .merge import merge_suggestions
from .normalize import normalize_text, query_tokens, strip_diacritics
from .pipeline_types import AddressSuggestion, CascadeResult, CommuneGeoContext


class CascadeState(enum.Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"
    DONE = "done"


# =============================================================================
# Query building
# =============================================================================

def clamp_limit(limit: Optional[int]) -> int:
    """Provider `limit`, clamped into [RESULT_MIN, RESULT_MAX]."""
    if limit is None:
        return config.RESULT_DEFAULT
    return max(config.RESULT_MIN, min(config.RESULT_MAX, int(limit)))


def _join(*parts: str) -> str:
    return " ".join(p.strip() for p in parts if p and p.strip())


def build_primary_query(query: str, geo: CommuneGeoContext) -> str:
    """'12 rue de la Paix' -> '12 rue de la Paix Springfield'."""
    return _join(query, geo.name)


def build_fallback_queries(query: str, geo: CommuneGeoContext) -> List[str]:
    stripped = strip_diacritics(query).strip()
    if not stripped:
        return []
    candidates = [
        stripped,
        _join(stripped, strip_diacritics(geo.name)),
        _join(stripped, geo.first_postal_code),
    ]
    # dict keeps insertion order
    return list(dict.fromkeys(c for c in candidates if c))


# =============================================================================
# Decision gate
# =============================================================================

def has_meaningful_match(
    suggestions: Sequence[AddressSuggestion],
    tokens: Sequence[str],
) -> bool:
    """True when some label contains every significant query token.

    With no significant token at all, any suggestion is good enough.
    """
    if not tokens:
        return len(suggestions) > 0
    for s in suggestions:
        label = normalize_text(s.label)
        if all(t in label for t in tokens):
            return True
    return False


# =============================================================================
# Cascade
# =============================================================================

def run_cascade(
    query: str,
    geo: CommuneGeoContext,
    client: BanClient,
    max_results: int = config.RESULT_DEFAULT,
) -> CascadeResult:
    tokens = query_tokens(query)
    attempts: List[str] = []
    suggestions: Sequence[AddressSuggestion] = []
    fallback_queries: List[str] = []
    index = 0
    state = CascadeState.PRIMARY

    while state is not CascadeState.DONE:
        if state is CascadeState.PRIMARY:
            primary_query = build_primary_query(query, geo)
            attempts.append(primary_query)
            try:
                features = client.search(
                    primary_query,
                    limit=max_results,
                    latitude=geo.latitude,
                    longitude=geo.longitude,
                    types=config.PRIMARY_RESULT_TYPES,
                )
            except GeocoderError as e:
                logger.warning("Primary BAN search failed for commune {}: {}", geo.id, e)
                raise GeocoderUnavailableError() from e

            suggestions = map_features(features, geo, origin="primary")
            if has_meaningful_match(suggestions, tokens):
                logger.debug("Primary search satisfied {!r} ({} suggestions)", query, len(suggestions))
                state = CascadeState.DONE
            else:
                fallback_queries = build_fallback_queries(query, geo)
                state = CascadeState.FALLBACK if fallback_queries else CascadeState.DONE
            continue

        fallback_query = fallback_queries[index]
        index += 1
        attempts.append(fallback_query)
        try:
            features = client.search(
                fallback_query,
                limit=max_results,
                latitude=geo.latitude,
                longitude=geo.longitude,
            )
        except GeocoderError as e:
            logger.warning("Fallback BAN search {!r} failed, continuing: {}", fallback_query, e)
            features = []

        suggestions = merge_suggestions(suggestions, map_features(features, geo, origin="fallback"))
        if has_meaningful_match(suggestions, tokens) or index >= len(fallback_queries):
            state = CascadeState.DONE

    logger.debug(
        "Cascade for {!r} in commune {}: {} attempt(s), {} suggestion(s)",
        query, geo.id, len(attempts), len(suggestions),
    )
    return CascadeResult(suggestions=list(suggestions), tokens=tokens, attempts=attempts)
