# ==============================================
# IntegrityChecker
# ==============================================
#
# PURPOSE:
#   Read-only verification pass run after the repairs. Reports
#   records that are missing the fields the app cannot do
#   without. Nothing here is patched: these values have no
#   sensible default and need a human to fill them in.
#
# CHECKS:
# -------
#   courses  → title, description, language, difficulty, moduleCount
#   modules  → courseId, lessonIds (must be a list)
#   lessons  → moduleId, courseId
#
#   Empty values (None, "", 0, []) count as missing here.
#
# ==============================================

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..normalization.record import Record

REQUIRED_FIELDS: Dict[str, Sequence[str]] = {
    "courses": ("title", "description", "language", "difficulty", "moduleCount"),
    "modules": ("courseId",),
    "lessons": ("moduleId", "courseId"),
}


@dataclass(frozen=True)
class IntegrityIssue:
    collection: str
    record_id: str
    message: str

    def __str__(self) -> str:
        return f"{self.collection}/{self.record_id}: {self.message}"


class IntegrityChecker:
    def __init__(self, required_fields: Optional[Dict[str, Sequence[str]]] = None):
        self.required_fields = required_fields or REQUIRED_FIELDS

    def check_collection(self, collection_name: str, records: List[Record]) -> List[IntegrityIssue]:
        issues = []
        for record in records:
            for field_name in self.required_fields.get(collection_name, ()):
                if not record.get(field_name):
                    issues.append(IntegrityIssue(collection_name, record.id, f"missing field: {field_name}"))

            if collection_name == "modules":
                lesson_ids = record.get("lessonIds")
                if not isinstance(lesson_ids, list):
                    issues.append(IntegrityIssue(collection_name, record.id, "missing or invalid lessonIds"))
        return issues

    def check_store(self, store) -> List[IntegrityIssue]:
        """
        Run every check against the store.

        Args:
            store: Document store exposing list_records(collection)

        Returns:
            All issues found, in collection order
        """
        issues = []
        for collection_name in self.required_fields:
            issues.extend(self.check_collection(collection_name, store.list_records(collection_name)))
        return issues
