# address_suggest/rerank.py
from __future__ import annotations

from typing import List, Sequence

from loguru import logger

from . import config
from .normalize import collation_key, normalize_text, numeric_tokens
from .pipeline_types import AddressSuggestion, ScoredSuggestion


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def score_suggestion(
    suggestion: AddressSuggestion,
    tokens: Sequence[str],
    normalized_query: str,
) -> ScoredSuggestion:
    """
    score = token_matches * 10 + starts_with_query * 5 + numeric_match * 3

      - token_matches: query tokens found in the normalized label or name
      - starts_with_query: normalized label starts with the whole query
      - numeric_match: every numeric token (house number, postcode) present,
        or the query has none
    """
    label = normalize_text(suggestion.label)
    name = normalize_text(suggestion.name)

    token_matches = sum(1 for t in tokens if t in label or t in name)
    starts_with_query = 1 if normalized_query and label.startswith(normalized_query) else 0
    numbers = numeric_tokens(tokens)
    numeric_match = 1 if all(n in label or n in name for n in numbers) else 0

    score = (
        token_matches * config.SCORE_TOKEN_WEIGHT
        + starts_with_query * config.SCORE_PREFIX_WEIGHT
        + numeric_match * config.SCORE_NUMERIC_WEIGHT
    )
    return ScoredSuggestion(suggestion=suggestion, token_matches=token_matches, score=float(score))


def _sort_key(scored: ScoredSuggestion):
    # score desc, primary before fallback, then French collation of the label
    return (
        -scored.score,
        0 if scored.suggestion.origin == "primary" else 1,
        collation_key(scored.suggestion.label),
    )


# ---------------------------------------------------------------------------
# Main entry
# ---------------------------------------------------------------------------

def rank_suggestions(
    suggestions: Sequence[AddressSuggestion],
    tokens: Sequence[str],
    query: str,
) -> List[AddressSuggestion]:
    """
    High-level rank:
      1) no tokens or nothing to rank -> provider order untouched
      2) score every suggestion against the normalized query
      3) keep those matching at least one token (all of them if none does)
      4) sort deterministically by (-score, origin, label)
    """
    if not tokens or not suggestions:
        return list(suggestions)

    normalized_query = normalize_text(query)
    scored = [score_suggestion(s, tokens, normalized_query) for s in suggestions]

    matching = [s for s in scored if s.token_matches > 0]
    if not matching:
        logger.debug("rank_suggestions: no token matched {!r}; ranking all {}", query, len(scored))
        matching = scored

    matching.sort(key=_sort_key)
    return [s.suggestion for s in matching]
