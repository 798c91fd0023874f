from __future__ import annotations

"""
Entry point of the address suggestion engine.

    validate query -> cascade (primary + fallbacks) -> rank -> cap

The engine is a pure pipeline over its inputs: no shared state, no cache,
safe to call concurrently for independent requests.
"""

from typing import List, Optional

from loguru import logger

from . import config
from .ban_client import BanClient
from .cascade import clamp_limit, run_cascade
from .config import SuggestResponse
from .errors import InvalidRequestError
from .mapping import map_suggestions_to_response
from .pipeline_types import AddressSuggestion, CommuneGeoContext
from .rerank import rank_suggestions


def validate_query(q: Optional[str]) -> str:
    query = (q or "").strip()
    if len(query) < config.QUERY_MIN_CHARS:
        raise InvalidRequestError("Requête trop courte.")
    return query


def suggest_addresses(
    q: str,
    geo: CommuneGeoContext,
    client: BanClient,
    limit: Optional[int] = None,
) -> List[AddressSuggestion]:
    """Ranked suggestions for `q` inside `geo`, at most `limit` of them.

    Raises InvalidRequestError before any network call when the query is
    too short, and GeocoderUnavailableError when the primary search fails.
    """
    query = validate_query(q)
    max_results = clamp_limit(limit)

    result = run_cascade(query, geo, client, max_results=max_results)
    ranked = rank_suggestions(result.suggestions, result.tokens, query)

    # fallback merging can exceed the per-request provider limit
    if len(ranked) > max_results:
        logger.debug("Truncating {} suggestions to {}", len(ranked), max_results)
        ranked = ranked[:max_results]
    return ranked


def run_suggest_pipeline(
    q: str,
    geo: CommuneGeoContext,
    client: BanClient,
    limit: Optional[int] = None,
) -> SuggestResponse:
    return map_suggestions_to_response(suggest_addresses(q, geo, client, limit=limit))
