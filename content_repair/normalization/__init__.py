# ==============================================
# NORMALIZATION ENGINE
# ==============================================
#
# Pure decision logic: given a snapshot of records and a
# canonical schema, work out the minimal patches that bring
# each record into canonical form. No I/O happens here.
#
# Modules:
# --------
# - value_kinds.py       → Closed set of value shapes (ABSENT, NULL, BOOL, ...)
# - record.py            → Record snapshot and Patch
# - classifier.py        → OR-based category membership signals
# - field_rules.py       → Per-field coercions and orderIndex assignment
# - schemas.py           → CanonicalSchema / FieldSpec and built-in schemas
# - record_normalizer.py → Computes patches for a record or a collection
# - snippets.py          → Restores quiz code snippets from a catalog
#
# ==============================================

from .value_kinds import MISSING, ValueKind
from .record import Record, Patch
from .classifier import Category, BOOLEAN_QUESTION, classify
from .schemas import CanonicalSchema, FieldSpec, SERVER_TIMESTAMP
from .record_normalizer import RecordNormalizer
from .snippets import SnippetCatalog

__all__ = [
    "MISSING",
    "ValueKind",
    "Record",
    "Patch",
    "Category",
    "BOOLEAN_QUESTION",
    "classify",
    "CanonicalSchema",
    "FieldSpec",
    "SERVER_TIMESTAMP",
    "RecordNormalizer",
    "SnippetCatalog",
]
