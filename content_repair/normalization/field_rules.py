# ==============================================
# Field Rules
# ==============================================
#
# PURPOSE:
#   Per-field coercion rules. Each rule takes the current value
#   (MISSING when the field is absent) and returns the canonical
#   value, or MISSING to leave the field untouched.
#
# RULES:
# ------
#   - canonical_boolean_answer(value)
#       BOOL    → "True" / "False"
#       STRING  → "True" / "False" when it reads true/false in any case
#       other   → untouched
#
#   - canonical_boolean_options(value)
#       exactly two strings that read {"true", "false"} → ["True", "False"]
#       other   → untouched
#
#   - required_literal(literal)
#       returns a rule that always yields the literal
#
#   - assign_order_indexes(records, field_name) -> dict[id, int]
#       Sibling-set rule. Sort by id, give every record whose
#       field is absent or null its 0-based position.
#
# ==============================================

from typing import Any, Callable, Dict, Iterable

from .record import Record
from .value_kinds import MISSING, ValueKind, detect

Rule = Callable[[Any], Any]

BOOLEAN_LITERALS = {"true": "True", "false": "False"}
BOOLEAN_OPTIONS = ["True", "False"]


def canonical_boolean_answer(value: Any) -> Any:
    kind = detect(value)

    if kind is ValueKind.BOOL:
        return "True" if value else "False"

    if kind is ValueKind.STRING:
        return BOOLEAN_LITERALS.get(value.lower(), MISSING)

    return MISSING


def canonical_boolean_options(value: Any) -> Any:
    if detect(value) is not ValueKind.SEQUENCE or len(value) != 2:
        return MISSING

    if not all(detect(option) is ValueKind.STRING for option in value):
        return MISSING

    if {option.lower() for option in value} != set(BOOLEAN_LITERALS):
        return MISSING

    return list(BOOLEAN_OPTIONS)


def required_literal(literal: Any) -> Rule:
    def rule(value: Any) -> Any:
        return literal

    rule.__name__ = f"required_literal({literal!r})"
    return rule


def assign_order_indexes(records: Iterable[Record], field_name: str = "orderIndex") -> Dict[str, int]:
    """
    Positions for the records of one sibling set that have no ordering value.

    Ids never change, so sorting by id gives the same assignment on every
    run. Records that already carry a value keep it and still occupy their
    slot in the sort.
    """
    assigned = {}
    for position, record in enumerate(sorted(records, key=lambda r: r.id)):
        if detect(record.get(field_name)) in (ValueKind.ABSENT, ValueKind.NULL):
            assigned[record.id] = position
    return assigned
