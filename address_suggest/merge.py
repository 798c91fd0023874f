from __future__ import annotations

from typing import List, Sequence

from .pipeline_types import AddressSuggestion

__all__ = ["suggestion_key", "merge_suggestions"]


def suggestion_key(suggestion: AddressSuggestion) -> str:
    return suggestion.id or suggestion.label


def merge_suggestions(
    base: Sequence[AddressSuggestion],
    additional: Sequence[AddressSuggestion],
) -> Sequence[AddressSuggestion]:
    """
    - Keep `base` as is, then append unseen items of `additional`.
    - Identity is the provider id (label when the id is empty).
    - Preserve first-seen order.
    """
    if not additional:
        return base

    seen = {suggestion_key(s) for s in base}
    out: List[AddressSuggestion] = list(base)
    for s in additional:
        key = suggestion_key(s)
        if key in seen:
            continue
        seen.add(key)
        out.append(s)
    return out
