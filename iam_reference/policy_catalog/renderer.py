"""Markdown rendering of a resolved action."""
from __future__ import annotations

from collections.abc import Iterable

from .catalog import Catalog
from .models import ResourceTypeReference
from .resolver import ResolvedAction

NO_MATCH = "No match"


def render_action(catalog: Catalog, resolved: ResolvedAction | None) -> str:
    if resolved is None:
        return NO_MATCH
    service = resolved.service
    action = resolved.action
    lines = [
        f"**Service:** {service.name}",
        f"**Action:** {service.prefix}:{action.name}",
        f"**Description:** {action.description}",
        f"**Access Level:** {action.access_level}",
        f"**Resource Types:** {format_references(action.resource_type_refs)}",
        "**Condition Keys:** " + ", ".join(dict.fromkeys(action.condition_key_names)),
    ]
    if action.dependent_action_names:
        lines.append("**Dependent Actions:** " + ", ".join(action.dependent_action_names))

    resource_types = catalog.resource_types_referenced_by(service, action)
    if resource_types:
        lines.extend(["", "## Relevant Resource Types", ""])
        lines.append("| Resource Type | ARN | Condition Keys |")
        lines.append("| --- | --- | --- |")
        for resource_type in resource_types:
            lines.append(
                format_row(
                    [
                        resource_type.name,
                        resource_type.arn,
                        ", ".join(resource_type.condition_key_names),
                    ]
                )
            )

    key_names = catalog.relevant_condition_key_names(service, action)
    condition_keys = catalog.condition_keys_named(service, key_names)
    if condition_keys:
        lines.extend(["", "## Relevant Condition Keys", ""])
        lines.append("| Condition Key | Description | Type |")
        lines.append("| --- | --- | --- |")
        for condition_key in condition_keys:
            lines.append(
                format_row([condition_key.name, condition_key.description, condition_key.type])
            )
    return "\n".join(lines)


def format_references(references: Iterable[ResourceTypeReference]) -> str:
    return ", ".join(
        f"{reference.name} (required)" if reference.required else reference.name
        for reference in references
    )


def format_row(values: Iterable[str]) -> str:
    return "| " + " | ".join(escape_cell(value) for value in values) + " |"


def escape_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", "<br>")
