"""Prefill sources - Where a prefilled value comes from.

A PrefillSource is a tagged union:
- FormFieldSource: a field on an upstream form in the graph
- GlobalSource: a property from the global source catalog

The variant is identified by ``kind`` alone. Labels are display text and
are never used to tell variants apart.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class SourceKind(Enum):
    """Tags of the PrefillSource union (values match the wire format)."""

    FORM_FIELD = "formField"
    GLOBAL = "global"


@dataclass(frozen=True)
class FormFieldSource:
    """Prefill from a field of another form.

    Attributes:
        form_id: The upstream form.
        field_id: The field on the upstream form.
        label: Display text, e.g. "Form A.email".
    """

    form_id: str
    field_id: str
    label: str = ""

    kind = SourceKind.FORM_FIELD

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "formId": self.form_id,
            "fieldId": self.field_id,
            "label": self.label,
        }


@dataclass(frozen=True)
class GlobalSource:
    """Prefill from a global catalog property.

    Attributes:
        label: Display text, e.g. "Action Properties.priority".
        group_id: Catalog entry id, when known.
        field_id: Property id within the catalog entry, when known.
    """

    label: str
    group_id: str | None = None
    field_id: str | None = None

    kind = SourceKind.GLOBAL

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.kind.value, "label": self.label}
        if self.group_id is not None:
            result["groupId"] = self.group_id
        if self.field_id is not None:
            result["fieldId"] = self.field_id
        return result


PrefillSource = Union[FormFieldSource, GlobalSource]
PrefillMapping = dict[str, PrefillSource]
PrefillState = dict[str, PrefillMapping]


def source_from_dict(data: Mapping[str, Any]) -> PrefillSource:
    """Rebuild a PrefillSource from its wire dict.

    Args:
        data: Dict with ``type`` and the variant's keys.

    Returns:
        FormFieldSource or GlobalSource.

    Raises:
        ValueError: If ``type`` is missing or unknown, or a form field
            source lacks ``formId``/``fieldId``.
    """
    kind = data.get("type")
    if kind == SourceKind.FORM_FIELD.value:
        if not data.get("formId") or not data.get("fieldId"):
            raise ValueError("formField source requires formId and fieldId")
        return FormFieldSource(
            form_id=data["formId"],
            field_id=data["fieldId"],
            label=data.get("label", ""),
        )
    if kind == SourceKind.GLOBAL.value:
        return GlobalSource(
            label=data.get("label", ""),
            group_id=data.get("groupId"),
            field_id=data.get("fieldId"),
        )
    raise ValueError(f"Unknown prefill source type: {kind!r}")


def state_from_dict(data: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> PrefillState:
    """Rebuild a PrefillState from nested wire dicts."""
    return {
        form_id: {field_id: source_from_dict(src) for field_id, src in mapping.items()}
        for form_id, mapping in data.items()
    }
