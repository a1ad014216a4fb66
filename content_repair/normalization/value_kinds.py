# ==============================================
# Value Kinds
# ==============================================
#
# PURPOSE:
#   Name the runtime shape of a field value so every repair
#   rule can dispatch on one closed set of kinds instead of
#   probing types ad hoc.
#
# ENUM: ValueKind
# ---------------
#   ABSENT, NULL, BOOL, NUMBER, STRING, SEQUENCE, MAPPING
#
# FUNCTIONS:
# ----------
#   - detect(value) -> ValueKind
#       MISSING -> ABSENT, None -> NULL, bool -> BOOL (checked
#       before int), int/float -> NUMBER, str -> STRING,
#       list/tuple -> SEQUENCE, dict/Mapping -> MAPPING.
#       Anything else (datetime, ObjectId, ...) -> OTHER.
#
#   - same_value(a, b) -> bool
#       Equality that does not treat True == 1 or 1 == 1.0 as equal.
#
# ==============================================

from enum import Enum
from typing import Any, Mapping


class _Missing:
    """Marker for a field that is not present on a record."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


class ValueKind(Enum):
    ABSENT = "absent"
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OTHER = "other"


def detect(value: Any) -> ValueKind:
    if value is MISSING:
        return ValueKind.ABSENT

    if value is None:
        return ValueKind.NULL

    # bool is a subclass of int, so it has to be checked first
    if isinstance(value, bool):
        return ValueKind.BOOL

    if isinstance(value, (int, float)):
        return ValueKind.NUMBER

    if isinstance(value, str):
        return ValueKind.STRING

    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE

    if isinstance(value, Mapping):
        return ValueKind.MAPPING

    return ValueKind.OTHER


def is_number(value: Any) -> bool:
    return detect(value) is ValueKind.NUMBER


def same_value(a: Any, b: Any) -> bool:
    """
    Strict equality used when deciding whether a field needs a patch.

    Plain ``==`` says ``True == 1`` and ``[1] == [True]``; a stored
    boolean answer compared against an int would then look canonical.
    """
    kind_a, kind_b = detect(a), detect(b)
    if kind_a is not kind_b:
        return False

    if kind_a is ValueKind.SEQUENCE:
        return len(a) == len(b) and all(same_value(x, y) for x, y in zip(a, b))

    if kind_a is ValueKind.MAPPING:
        if set(a.keys()) != set(b.keys()):
            return False
        return all(same_value(a[key], b[key]) for key in a)

    if kind_a is ValueKind.NUMBER:
        return type(a) is type(b) and a == b

    return a == b
