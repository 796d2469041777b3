"""Print objects as ``kind.group/name`` lines."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TextIO

from ctlptl.api import GroupKind, GroupVersionKind

_UNKNOWN = "<unknown>"


def _group_version_kind(obj: Any) -> GroupVersionKind:
    if isinstance(obj, Mapping):
        return GroupVersionKind.from_api_version_and_kind(
            obj.get("apiVersion", "") or "", obj.get("kind", "") or ""
        )
    return obj.group_version_kind()


def _name_of(obj: Any) -> str:
    if isinstance(obj, Mapping):
        metadata = obj.get("metadata")
        if isinstance(metadata, Mapping) and metadata.get("name"):
            return metadata["name"]
        return obj.get("name", "") or ""
    return getattr(obj, "name", "") or ""


def get_object_group_kind(obj: Any) -> GroupKind:
    """Return the group and kind of an object, or an unknown kind."""
    if obj is None:
        return GroupKind(kind=_UNKNOWN)
    gvk = _group_version_kind(obj)
    if gvk.kind:
        return gvk.group_kind()
    return GroupKind(kind=_UNKNOWN)


@dataclass
class NamePrinter:
    """Writes ``resource/name`` for an object, optionally followed by an operation."""

    short_output: bool = False
    operation: str = ""

    def print_obj(self, obj: Any, out: TextIO) -> None:
        gvk = _group_version_kind(obj)
        if not (gvk.group or gvk.version or gvk.kind):
            raise ValueError(
                "missing apiVersion or kind; try set_group_version_kind() if you know the type"
            )
        name = _name_of(obj) or _UNKNOWN
        _write(out, name, self.operation, self.short_output, get_object_group_kind(obj))


def _write(out: TextIO, name: str, operation: str, short_output: bool, group_kind: GroupKind) -> None:
    if not group_kind.kind:
        raise ValueError(f"missing kind for resource with name {name}")
    suffix = "" if short_output or not operation else f" {operation}"
    kind = group_kind.kind.lower()
    if group_kind.group:
        out.write(f"{kind}.{group_kind.group}/{name}{suffix}\n")
    else:
        out.write(f"{kind}/{name}{suffix}\n")