"""Fuzzy ``prefix:action`` lookup over a catalog, with duplicate-row merging.

A service page can list the same action in more than one table fragment,
each fragment carrying part of the resource and condition key lists. The
index keeps all of them under one key and :func:`merge_actions` folds them
back into a single record.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from .catalog import Catalog
from .models import ActionRecord, Service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rank:
    target: str
    distance: int
    index: int


@dataclass(frozen=True)
class ActionIndex:
    """Lower-cased ``prefix:action`` keys mapped to every row carrying them."""

    keys: tuple[str, ...]
    groups: Mapping[str, tuple[tuple[Service, ActionRecord], ...]]

    def __len__(self) -> int:
        return len(self.keys)

    def __contains__(self, key: object) -> bool:
        return key in self.groups


@dataclass(frozen=True)
class ResolvedAction:
    key: str
    service: Service
    action: ActionRecord


def action_key(service: Service, action: ActionRecord) -> str:
    return f"{service.prefix}:{action.name}".lower()


def build_index(catalog: Catalog) -> ActionIndex:
    groups: dict[str, list[tuple[Service, ActionRecord]]] = {}
    for service in catalog:
        for action in service.actions:
            groups.setdefault(action_key(service, action), []).append((service, action))
    logger.debug("Indexed %d action keys from %d services", len(groups), len(catalog))
    return ActionIndex(
        keys=tuple(groups),
        groups={key: tuple(rows) for key, rows in groups.items()},
    )


def is_subsequence(query: str, target: str) -> bool:
    remaining = iter(target)
    return all(char in remaining for char in query)


def rank_find(query: str, targets: Sequence[str]) -> list[Rank]:
    """Rank targets containing ``query`` as a subsequence by edit distance."""
    ranks = [
        Rank(target=target, distance=Levenshtein.distance(query, target), index=index)
        for index, target in enumerate(targets)
        if is_subsequence(query, target)
    ]
    ranks.sort(key=lambda rank: (rank.distance, rank.index))
    return ranks


def best_matches(query: str, targets: Sequence[str]) -> list[Rank]:
    """Fuzzy ranks, restricted to literal prefix matches whenever there are any."""
    ranks = rank_find(query, targets)
    with_prefix = [rank for rank in ranks if rank.target.startswith(query)]
    if with_prefix:
        return with_prefix
    return ranks


def merge_actions(actions: Sequence[ActionRecord]) -> ActionRecord | None:
    """Fold rows of one action together.

    Scalars come from the first row; list fields are concatenated in row
    order without removing repeats.
    """
    if not actions:
        return None
    first = actions[0]
    return ActionRecord(
        name=first.name,
        description=first.description,
        access_level=first.access_level,
        resource_type_refs=tuple(ref for action in actions for ref in action.resource_type_refs),
        condition_key_names=tuple(
            name for action in actions for name in action.condition_key_names
        ),
        dependent_action_names=tuple(
            name for action in actions for name in action.dependent_action_names
        ),
    )


def lookup(index: ActionIndex, key: str) -> ResolvedAction | None:
    rows = index.groups.get(key)
    if not rows:
        return None
    merged = merge_actions([action for _, action in rows])
    if merged is None:
        return None
    return ResolvedAction(key=key, service=rows[0][0], action=merged)


def resolve(index: ActionIndex, query: str) -> ResolvedAction | None:
    """Best action for ``query``, or ``None`` when nothing matches."""
    matches = best_matches(query.lower(), index.keys)
    if not matches:
        logger.debug("No action matches %r", query)
        return None
    return lookup(index, matches[0].target)
