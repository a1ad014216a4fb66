# ==============================================
# Tests for IntegrityChecker
# ==============================================

from typing import Dict, Optional, Sequence, get_type_hints

from content_repair.analysis.integrity import IntegrityChecker
from content_repair.normalization.record import Record


class TestIntegrityChecker:
    def test_complete_course_has_no_issues(self):
        course = Record("c1", {
            "title": "Python", "description": "d", "language": "python", "difficulty": "beginner", "moduleCount": 8,
        })
        assert IntegrityChecker().check_collection("courses", [course]) == []

    def test_course_missing_fields(self):
        issues = IntegrityChecker().check_collection("courses", [Record("c1", {"title": "Python", "moduleCount": 0})])
        assert [issue.message for issue in issues] == [
            "missing field: description",
            "missing field: language",
            "missing field: difficulty",
            "missing field: moduleCount",
        ]

    def test_module_lesson_ids_must_be_list(self):
        issues = IntegrityChecker().check_collection("modules", [
            Record("m1", {"courseId": "c1", "lessonIds": "l1,l2"}),
            Record("m2", {"courseId": "c1", "lessonIds": []}),
        ])
        assert [str(issue) for issue in issues] == ["modules/m1: missing or invalid lessonIds"]

    def test_custom_required_fields(self):
        checker = IntegrityChecker({"progress": ["userId"]})
        issues = checker.check_collection("progress", [Record("p1", {})])
        assert [str(issue) for issue in issues] == ["progress/p1: missing field: userId"]

    def test_required_fields_is_optional(self):
        hints = get_type_hints(IntegrityChecker.__init__)
        assert hints["required_fields"] == Optional[Dict[str, Sequence[str]]]

    def test_unknown_collection_has_no_rules(self):
        assert IntegrityChecker().check_collection("progress", [Record("p1", {})]) == []

    def test_check_store(self, store):
        store.add("lessons", "l1", {"courseId": "c1"})
        store.add("modules", "m1", {"lessonIds": []})
        issues = IntegrityChecker().check_store(store)
        assert [str(issue) for issue in issues] == [
            "modules/m1: missing field: courseId",
            "lessons/l1: missing field: moduleId",
        ]
