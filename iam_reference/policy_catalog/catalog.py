"""In-memory catalog of services with cross-reference lookups."""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .models import ActionRecord, ConditionKeyRecord, ResourceTypeRecord, Service


@dataclass(frozen=True)
class _ServiceIndex:
    resource_types: dict[str, list[ResourceTypeRecord]]
    condition_keys: dict[str, list[ConditionKeyRecord]]


def _index_service(service: Service) -> _ServiceIndex:
    resource_types: dict[str, list[ResourceTypeRecord]] = {}
    for resource_type in service.resource_types:
        resource_types.setdefault(resource_type.name, []).append(resource_type)
    condition_keys: dict[str, list[ConditionKeyRecord]] = {}
    for condition_key in service.condition_keys:
        condition_keys.setdefault(condition_key.name, []).append(condition_key)
    return _ServiceIndex(resource_types=resource_types, condition_keys=condition_keys)


@dataclass(frozen=True)
class Catalog:
    """Services sorted by name.

    A catalog is never patched: re-ingesting builds a new one, so readers can
    keep using the instance they hold.
    """

    services: tuple[Service, ...]
    _indexes: dict[int, _ServiceIndex] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )
    _by_prefix: dict[str, list[Service]] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        for service in self.services:
            self._indexes[id(service)] = _index_service(service)
            self._by_prefix.setdefault(service.prefix, []).append(service)

    @classmethod
    def build(cls, services: Iterable[Service]) -> Catalog:
        return cls(services=tuple(sorted(services, key=lambda service: service.name)))

    def __iter__(self) -> Iterator[Service]:
        return iter(self.services)

    def __len__(self) -> int:
        return len(self.services)

    @property
    def action_count(self) -> int:
        return sum(len(service.actions) for service in self.services)

    def services_with_prefix(self, prefix: str) -> list[Service]:
        return list(self._by_prefix.get(prefix, []))

    def _index_for(self, service: Service) -> _ServiceIndex:
        index = self._indexes.get(id(service))
        if index is None:
            return _index_service(service)
        return index

    def resource_types_referenced_by(
        self, service: Service, action: ActionRecord
    ) -> list[ResourceTypeRecord]:
        """Resource types of ``service`` named by ``action``, in reference order.

        References without a matching record yield nothing.
        """
        index = self._index_for(service)
        matches: list[ResourceTypeRecord] = []
        for reference in action.resource_type_refs:
            matches.extend(index.resource_types.get(reference.name, []))
        return matches

    def condition_keys_named(
        self, service: Service, names: Iterable[str]
    ) -> list[ConditionKeyRecord]:
        index = self._index_for(service)
        matches: list[ConditionKeyRecord] = []
        for name in names:
            matches.extend(index.condition_keys.get(name, []))
        return matches

    def relevant_condition_key_names(self, service: Service, action: ActionRecord) -> list[str]:
        """Condition keys of the action followed by those of its resource types, deduplicated."""
        names = list(action.condition_key_names)
        for resource_type in self.resource_types_referenced_by(service, action):
            names.extend(resource_type.condition_key_names)
        return list(dict.fromkeys(names))
