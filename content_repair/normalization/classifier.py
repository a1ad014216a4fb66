# ==============================================
# Classifier
# ==============================================
#
# PURPOSE:
#   Decide whether a record belongs to a special category
#   (e.g. "boolean question") before category-specific repair
#   rules are applied to it.
#
# HOW IT DECIDES:
#   Three independent signals, OR-ed together:
#
#     SIGNAL 1: TYPE TAG
#       record[type_field] == category.explicit_type_value
#
#     SIGNAL 2: OPTION SET
#       set(record[options_field]) == category.option_set
#       (order-insensitive, case-insensitive, strings only)
#
#     SIGNAL 3: KEYWORD
#       category.keyword.lower() in record[text_field].lower()
#
#   A record matching any one signal is a member.
#
#   NOTE: the keyword signal will also match a question that merely
#   mentions "true or false" in passing.
#
# CLASS: Category (dataclass)
# ---------------------------
#   name, explicit_type_value, option_set, keyword,
#   type_field="type", options_field="options", text_field="question"
#
# FUNCTIONS:
# ----------
#   - matches_type_tag(record, category) -> bool
#   - matches_option_set(record, category) -> bool
#   - matches_keyword(record, category) -> bool
#   - classify(record, category) -> bool
#
#   None of these raise on malformed records.
#
# ==============================================

from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Optional

from .record import Record
from .value_kinds import ValueKind, detect


@dataclass(frozen=True)
class Category:
    """Descriptor of a record category and the signals that identify it."""

    name: str
    explicit_type_value: Optional[str] = None
    option_set: Optional[FrozenSet[str]] = None
    keyword: Optional[str] = None
    type_field: str = "type"
    options_field: str = "options"
    text_field: str = "question"


BOOLEAN_QUESTION = Category(
    name="boolean_question",
    explicit_type_value="boolean",
    option_set=frozenset({"True", "False"}),
    keyword="true or false",
)


def matches_type_tag(record: Record, category: Category) -> bool:
    if category.explicit_type_value is None:
        return False
    value = record.get(category.type_field)
    return detect(value) is ValueKind.STRING and value == category.explicit_type_value


def matches_option_set(record: Record, category: Category) -> bool:
    if not category.option_set:
        return False
    options = record.get(category.options_field)
    if detect(options) is not ValueKind.SEQUENCE:
        return False
    if not all(detect(option) is ValueKind.STRING for option in options):
        return False
    wanted = {option.lower() for option in category.option_set}
    return {option.lower() for option in options} == wanted


def matches_keyword(record: Record, category: Category) -> bool:
    if not category.keyword:
        return False
    text = record.get(category.text_field)
    if detect(text) is not ValueKind.STRING:
        return False
    return category.keyword.lower() in text.lower()


SIGNALS: List[Callable[[Record, Category], bool]] = [
    matches_type_tag,
    matches_option_set,
    matches_keyword,
]


def classify(record: Record, category: Category) -> bool:
    """True when at least one signal places the record in the category."""
    return any(signal(record, category) for signal in SIGNALS)
