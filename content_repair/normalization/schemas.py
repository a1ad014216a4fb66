# ==============================================
# Canonical Schemas
# ==============================================
#
# PURPOSE:
#   Configuration objects describing what a canonical record of
#   each kind looks like, plus the built-in schemas for the
#   content collections.
#
# CLASSES:
# --------
# - FieldSpec (dataclass)
#     default: Any               → literal used when the field is absent
#     default_factory: callable  → record -> value, used when absent and
#                                  no literal default is set (may return MISSING)
#     synonyms: tuple[str]       → older field names whose value is copied
#                                  over when the field is absent
#     coerce: callable           → value -> canonical value or MISSING,
#                                  applied to present AND absent values
#     alternates: tuple          → present values accepted as-is even
#                                  though coerce would rewrite them
#                                  (lower-case "true"/"false" answers)
#
# - CanonicalSchema (dataclass)
#     kind: str                  → record kind, e.g. "lessons"
#     fields: dict[str, FieldSpec]
#     category: Category | None  → only classified records are repaired
#     order_field: str | None    → sibling-set ordering field
#
# SENTINEL:
# ---------
# - SERVER_TIMESTAMP
#     Placeholder default resolved by the document store to its own
#     clock at write time.
#
# ==============================================

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from .classifier import BOOLEAN_QUESTION, Category
from .field_rules import (
    canonical_boolean_answer,
    canonical_boolean_options,
    required_literal,
)
from .record import Record
from .value_kinds import MISSING, is_number, same_value


class _ServerTimestamp:
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
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class FieldSpec:
    default: Any = MISSING
    default_factory: Optional[Callable[[Record], Any]] = None
    synonyms: Tuple[str, ...] = ()
    coerce: Optional[Callable[[Any], Any]] = None
    alternates: Tuple[Any, ...] = ()

    def accepts(self, value: Any) -> bool:
        """True when a present value is an acceptable alternate representation."""
        return any(same_value(value, alternate) for alternate in self.alternates)


@dataclass(frozen=True)
class CanonicalSchema:
    kind: str
    fields: Dict[str, FieldSpec] = field(default_factory=dict)
    category: Optional[Category] = None
    order_field: Optional[str] = None


def _estimated_hours(record: Record) -> Any:
    # Two hours per module; unknown module count means no default
    module_count = record.get("moduleCount")
    if is_number(module_count):
        return module_count * 2
    return MISSING


COURSE_SCHEMA = CanonicalSchema(
    kind="courses",
    fields={
        "thumbnailUrl": FieldSpec(default=""),
        "rating": FieldSpec(default=0.0),
        "category": FieldSpec(default="Programming Languages"),
        "updatedAt": FieldSpec(default=SERVER_TIMESTAMP),
        "icon": FieldSpec(default="🐍"),
        "isFeatured": FieldSpec(default=False),
        "estimatedHours": FieldSpec(default_factory=_estimated_hours),
    },
)

ACHIEVEMENT_SCHEMA = CanonicalSchema(
    kind="achievements",
    fields={
        "iconAsset": FieldSpec(synonyms=("icon",)),
    },
)

USER_STATS_SCHEMA = CanonicalSchema(
    kind="user_stats",
    fields={
        "lessonsCompleted": FieldSpec(synonyms=("totalLessonsCompleted",)),
        "quizzesCompleted": FieldSpec(synonyms=("totalQuizzesCompleted",)),
        "challengesCompleted": FieldSpec(default=0),
        "coursesCompleted": FieldSpec(default=0),
        "perfectQuizzes": FieldSpec(default=0),
        "currentStreak": FieldSpec(default=0),
        "longestStreak": FieldSpec(default=0),
        "level": FieldSpec(default=1),
        "xpHistory": FieldSpec(default={}),
        "dailyXP": FieldSpec(default={}),
    },
)

LESSON_SCHEMA = CanonicalSchema(
    kind="lessons",
    fields={
        "createdAt": FieldSpec(default=SERVER_TIMESTAMP),
        "updatedAt": FieldSpec(default=SERVER_TIMESTAMP),
        "xpReward": FieldSpec(default=10),
        "videoUrl": FieldSpec(default=""),
        "keyPoints": FieldSpec(default=[]),
        "codeExamples": FieldSpec(default=[]),
    },
)

PROGRESS_SCHEMA = CanonicalSchema(
    kind="progress",
    fields={
        "quizScores": FieldSpec(default={}),
        "currentModuleId": FieldSpec(default=""),
        "currentLessonId": FieldSpec(default=""),
        "lastAccessedLesson": FieldSpec(default=""),
        "lastAccessedAt": FieldSpec(default=SERVER_TIMESTAMP),
        "completionPercentage": FieldSpec(default=0),
    },
)

QUESTION_STRUCTURE_SCHEMA = CanonicalSchema(
    kind="questions",
    fields={
        "points": FieldSpec(default=1),
        "difficulty": FieldSpec(default="easy"),
    },
    order_field="orderIndex",
)

QUESTION_ORDER_SCHEMA = CanonicalSchema(
    kind="questions",
    order_field="orderIndex",
)

BOOLEAN_QUESTION_SCHEMA = CanonicalSchema(
    kind="questions",
    fields={
        # Lower-case "true"/"false" are accepted answers and stay as written;
        # any other spelling of a boolean is rewritten to "True"/"False".
        "correctAnswer": FieldSpec(coerce=canonical_boolean_answer, alternates=("true", "false")),
        "options": FieldSpec(coerce=canonical_boolean_options),
        "type": FieldSpec(coerce=required_literal("boolean")),
    },
    category=BOOLEAN_QUESTION,
)
