# ==============================================
# Record / Patch (Data Classes)
# ==============================================
#
# PURPOSE:
#   The two values that flow through the repair pipeline.
#
#   - Record: a frozen snapshot of one stored document
#       id: str                      → unique within its collection
#       fields: Mapping[str, Any]    → read-only view of the body
#
#   - Patch: the minimal field-level correction for one record
#       record_id: str
#       changes: Mapping[str, Any]   → never empty
#
#   Records are never mutated. A patch is applied by the document
#   store; Patch.apply_to() exists so the result of a patch can be
#   re-checked without a round trip.
#
# ==============================================

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping

from .value_kinds import MISSING


@dataclass(frozen=True)
class Record:
    """A read-only snapshot of one document."""

    id: str
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Detach from the caller's dict so later edits can't leak in
        object.__setattr__(self, "fields", MappingProxyType(copy.deepcopy(dict(self.fields))))

    def get(self, name: str, default: Any = MISSING) -> Any:
        return self.fields.get(name, default)

    def has(self, name: str) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(dict(self.fields))


@dataclass(frozen=True)
class Patch:
    """Field-level changes for a single record. Empty patches are not allowed."""

    record_id: str
    changes: Mapping[str, Any]

    def __post_init__(self):
        if not self.changes:
            raise ValueError(f"Patch for '{self.record_id}' has no changes")
        object.__setattr__(self, "changes", MappingProxyType(dict(self.changes)))

    @property
    def field_names(self) -> list[str]:
        return list(self.changes.keys())

    def merge(self, other: "Patch") -> "Patch":
        """
        Combine two patches for the same record. Fields in ``other``
        win on conflict.
        """
        if other.record_id != self.record_id:
            raise ValueError(
                f"Cannot merge patch for '{other.record_id}' into '{self.record_id}'"
            )
        merged = dict(self.changes)
        merged.update(other.changes)
        return Patch(self.record_id, merged)

    def apply_to(self, record: Record) -> Record:
        if record.id != self.record_id:
            raise ValueError(f"Patch for '{self.record_id}' applied to '{record.id}'")
        body = record.to_dict()
        body.update(copy.deepcopy(dict(self.changes)))
        return Record(record.id, body)

    def to_dict(self) -> Dict[str, Any]:
        return {"record_id": self.record_id, "changes": dict(self.changes)}
