"""Record types for services and their actions, resource types and condition keys.

Records are frozen and hold tuples so a built catalog can be shared between
readers without copying. ``to_dict``/``from_dict`` use the field names of the
``rawData.json`` snapshot.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ResourceTypeReference:
    name: str
    required: bool = False

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "required": self.required}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResourceTypeReference:
        return cls(name=str(data["name"]), required=bool(data["required"]))


@dataclass(frozen=True)
class ActionRecord:
    name: str
    description: str = ""
    access_level: str = ""
    resource_type_refs: tuple[ResourceTypeReference, ...] = field(default_factory=tuple)
    condition_key_names: tuple[str, ...] = field(default_factory=tuple)
    dependent_action_names: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "accessLevel": self.access_level,
            "resourceTypeRefs": [ref.to_dict() for ref in self.resource_type_refs],
            "conditionKeyNames": list(self.condition_key_names),
            "dependentActionNames": list(self.dependent_action_names),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ActionRecord:
        return cls(
            name=str(data["name"]),
            description=str(data["description"]),
            access_level=str(data["accessLevel"]),
            resource_type_refs=tuple(
                ResourceTypeReference.from_dict(ref) for ref in data["resourceTypeRefs"]
            ),
            condition_key_names=tuple(str(name) for name in data["conditionKeyNames"]),
            dependent_action_names=tuple(str(name) for name in data["dependentActionNames"]),
        )


@dataclass(frozen=True)
class ResourceTypeRecord:
    name: str
    arn: str = ""
    condition_key_names: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "arn": self.arn,
            "conditionKeyNames": list(self.condition_key_names),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResourceTypeRecord:
        return cls(
            name=str(data["name"]),
            arn=str(data["arn"]),
            condition_key_names=tuple(str(name) for name in data["conditionKeyNames"]),
        )


@dataclass(frozen=True)
class ConditionKeyRecord:
    name: str
    description: str = ""
    type: str = ""

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "description": self.description, "type": self.type}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConditionKeyRecord:
        return cls(
            name=str(data["name"]),
            description=str(data["description"]),
            type=str(data["type"]),
        )


@dataclass(frozen=True)
class Service:
    """A service reference page: identity plus the records of its three tables."""

    url: str
    name: str
    prefix: str
    actions: tuple[ActionRecord, ...] = field(default_factory=tuple)
    resource_types: tuple[ResourceTypeRecord, ...] = field(default_factory=tuple)
    condition_keys: tuple[ConditionKeyRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        return {
            "url": self.url,
            "name": self.name,
            "prefix": self.prefix,
            "actions": [action.to_dict() for action in self.actions],
            "resourceTypes": [resource.to_dict() for resource in self.resource_types],
            "conditionKeys": [key.to_dict() for key in self.condition_keys],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Service:
        return cls(
            url=str(data["url"]),
            name=str(data["name"]),
            prefix=str(data["prefix"]),
            actions=tuple(ActionRecord.from_dict(item) for item in data["actions"]),
            resource_types=tuple(
                ResourceTypeRecord.from_dict(item) for item in data["resourceTypes"]
            ),
            condition_keys=tuple(
                ConditionKeyRecord.from_dict(item) for item in data["conditionKeys"]
            ),
        )
