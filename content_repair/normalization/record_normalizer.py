import copy
from typing import Any, Dict, Iterable, List, Optional

from .classifier import classify
from .field_rules import assign_order_indexes
from .record import Patch, Record
from .schemas import CanonicalSchema, FieldSpec
from .value_kinds import MISSING, same_value


class RecordNormalizer:
    def compute_patch(self, record: Record, schema: CanonicalSchema) -> Optional[Patch]:
        if schema.category is not None and not classify(record, schema.category):
            return None

        changes = {}
        for field_name, spec in schema.fields.items():
            new_value = self._resolve_field(record, field_name, spec)
            if new_value is not MISSING:
                changes[field_name] = new_value

        if not changes:
            return None
        return Patch(record.id, changes)

    def normalize_collection(self, records: Iterable[Record], schema: CanonicalSchema) -> List[Patch]:
        records = list(records)
        patches: Dict[str, Patch] = {}

        for record in records:
            patch = self.compute_patch(record, schema)
            if patch is not None:
                patches[record.id] = patch

        if schema.order_field:
            positions = assign_order_indexes(records, schema.order_field)
            for record_id, position in positions.items():
                order_patch = Patch(record_id, {schema.order_field: position})
                if record_id in patches:
                    patches[record_id] = patches[record_id].merge(order_patch)
                else:
                    patches[record_id] = order_patch

        # Keep the order the records arrived in
        return [patches[record.id] for record in records if record.id in patches]

    def _resolve_field(self, record: Record, field_name: str, spec: FieldSpec) -> Any:
        current = record.get(field_name)

        if current is MISSING:
            candidate = self._fill_absent(record, spec)
            if candidate is MISSING and spec.coerce is not None:
                candidate = spec.coerce(MISSING)
            return copy.deepcopy(candidate)

        # Present values are only ever touched by a coercion rule
        if spec.coerce is None or spec.accepts(current):
            return MISSING

        candidate = spec.coerce(current)
        if candidate is MISSING or same_value(candidate, current):
            return MISSING
        return candidate

    def _fill_absent(self, record: Record, spec: FieldSpec) -> Any:
        for synonym in spec.synonyms:
            if record.has(synonym):
                return record.get(synonym)

        if spec.default is not MISSING:
            return spec.default

        if spec.default_factory is not None:
            return spec.default_factory(record)

        return MISSING
