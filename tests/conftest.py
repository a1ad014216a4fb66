# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# - InMemoryDocumentStore: same interface as MongoDocumentStore,
#   backed by plain dicts, with call counters and an optional
#   failing commit.
# - Sample records for each collection the repair jobs touch.
# ==============================================

import copy
from datetime import datetime, timezone

import pytest

from content_repair.config import reset_config
from content_repair.normalization.record import Record
from content_repair.normalization.schemas import SERVER_TIMESTAMP
from content_repair.storage.mongo_client import subcollection_name


class InMemoryDocumentStore:
    """Dict-backed document store used in place of MongoDB."""

    def __init__(self, collections=None):
        self.collections = copy.deepcopy(collections or {})
        self.commits = []
        self.fail_on_commit = None
        self.connected = False

    def add(self, collection, record_id, body):
        self.collections.setdefault(collection, {})[record_id] = copy.deepcopy(body)

    def add_sub(self, parent_collection, parent_id, sub_collection, record_id, body):
        self.add(subcollection_name(parent_collection, parent_id, sub_collection), record_id, body)

    def body(self, collection, record_id):
        return self.collections[collection][record_id]

    def list_records(self, collection_name):
        documents = self.collections.get(collection_name, {})
        return [Record(record_id, body) for record_id, body in documents.items()]

    def list_subrecords(self, parent_collection, parent_id, sub_collection):
        return self.list_records(subcollection_name(parent_collection, parent_id, sub_collection))

    def apply_patches(self, collection_name, patches):
        if self.fail_on_commit:
            raise self.fail_on_commit
        self.commits.append((collection_name, list(patches)))
        documents = self.collections.setdefault(collection_name, {})
        for patch in patches:
            body = documents[patch.record_id]
            for field_name, value in patch.changes.items():
                if value is SERVER_TIMESTAMP:
                    value = datetime.now(timezone.utc)
                body[field_name] = copy.deepcopy(value)
        return len(patches)

    def set_document(self, collection_name, record_id, body):
        self.add(collection_name, record_id, body)

    def connect(self):
        self.connected = True

    def disconnect(self):
        self.connected = False

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


@pytest.fixture
def store():
    """An empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def seeded_store():
    """A store holding a small but messy content database."""
    store = InMemoryDocumentStore()

    store.add("courses", "python_fundamentals", {
        "title": "Python Fundamentals",
        "description": "Learn Python from scratch",
        "language": "python",
        "difficulty": "beginner",
        "moduleCount": 8,
        "rating": 0,
    })
    store.add("achievements", "first_lesson", {"title": "First Steps", "icon": "🎯"})
    store.add("user_stats", "user_1", {"totalLessonsCompleted": 4, "level": 3})
    store.add("lessons", "lesson_001", {"moduleId": "module_001", "courseId": "python_fundamentals", "xpReward": 0})
    store.add("progress", "user_1_python", {"completionPercentage": 25})
    store.add("modules", "module_001", {"courseId": "python_fundamentals", "lessonIds": ["lesson_001"]})

    store.add("quizzes", "quiz_variables", {"title": "Python Variables & Data Types"})
    store.add_sub("quizzes", "quiz_variables", "questions", "q_b", {
        "type": "boolean",
        "question": "True or False: Python is a statically typed language",
        "options": ["true", "false"],
        "correctAnswer": False,
    })
    store.add_sub("quizzes", "quiz_variables", "questions", "q_a", {
        "type": "mcq",
        "question": "What will be the output?",
        "options": ["True", "False", "Error", "None"],
        "correctAnswer": "False",
        "points": 0,
    })
    store.add_sub("quizzes", "quiz_variables", "questions", "q_c", {
        "question": "Is Python compiled?",
        "options": ["True", "False"],
        "correctAnswer": "FALSE",
        "orderIndex": 7,
    })

    store.add("quizzes", "quiz_misc", {"title": "Untracked Quiz"})
    return store


@pytest.fixture
def boolean_question():
    return Record("q_1", {
        "type": "boolean",
        "question": "True or False: lists are mutable",
        "options": ["True", "False"],
        "correctAnswer": "True",
    })


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts without a cached AppConfig."""
    reset_config()
    yield
    reset_config()
