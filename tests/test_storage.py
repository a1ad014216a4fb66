# ==============================================
# Tests for Storage Module
# ==============================================
#
# MongoDocumentStore is exercised without a server: update
# documents, record conversion, the not-connected guard, and
# reads/writes against a fake client[db][collection].
# BatchApplier runs against the in-memory store.
# ==============================================

from collections import defaultdict
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import BulkWriteError

from content_repair.normalization.record import Patch
from content_repair.normalization.record_normalizer import RecordNormalizer
from content_repair.normalization.schemas import QUESTION_STRUCTURE_SCHEMA, SERVER_TIMESTAMP
from content_repair.storage import mongo_client
from content_repair.storage.batch_applier import BatchApplier
from content_repair.storage.mongo_client import MongoDocumentStore, build_update, subcollection_name


class TestMongoDocumentStore:
    def test_subcollection_name(self):
        assert subcollection_name("quizzes", "quiz_1", "questions") == "quizzes.quiz_1.questions"

    def test_build_update_set_only(self):
        update = build_update(Patch("q", {"points": 1, "difficulty": "easy"}))
        assert update == {"$set": {"points": 1, "difficulty": "easy"}}

    def test_build_update_server_timestamp(self):
        update = build_update(Patch("l", {"xpReward": 10, "updatedAt": SERVER_TIMESTAMP}))
        assert update == {"$set": {"xpReward": 10}, "$currentDate": {"updatedAt": True}}

    def test_to_record_uses_id(self):
        record = MongoDocumentStore._to_record({"_id": "lesson_1", "title": "Intro"})
        assert record.id == "lesson_1"
        assert dict(record.fields) == {"title": "Intro"}

    def test_requires_connection(self):
        store = MongoDocumentStore()
        with pytest.raises(RuntimeError):
            store.list_records("courses")

    def test_no_patches_no_connection_needed(self):
        assert MongoDocumentStore().apply_patches("courses", []) == 0


QUESTIONS = "quizzes.quiz_1.questions"


class FakeCollection:
    """Just enough of a pymongo Collection for MongoDocumentStore."""

    def __init__(self):
        self.documents = []
        self.requests = []
        self.replaced = []

    def find(self, query):
        return [dict(document) for document in self.documents]

    def bulk_write(self, requests, ordered=True):
        self.requests.extend(requests)
        matched = 0
        for query, update in requests:
            for document in self.documents:
                if document["_id"] == query["_id"]:
                    document.update(update.get("$set", {}))
                    matched += 1
        return SimpleNamespace(matched_count=matched)

    def replace_one(self, query, document, upsert=False):
        self.replaced.append((query, document, upsert))


@pytest.fixture
def mongo(monkeypatch):
    # UpdateOne(filter, update) -> (filter, update) so requests can be inspected
    monkeypatch.setattr(mongo_client, "UpdateOne", lambda query, update: (query, update))
    store = MongoDocumentStore()
    collections = defaultdict(FakeCollection)
    store.client = {store.database: collections}
    return store, collections


class TestMongoDocumentStoreCollections:
    def test_object_id_survives_round_trip(self, mongo):
        store, collections = mongo
        oid = ObjectId()
        collections[QUESTIONS].documents.append({"_id": oid, "question": "x"})

        records = store.list_records(QUESTIONS)
        assert records[0].id == str(oid)

        patches = RecordNormalizer().normalize_collection(records, QUESTION_STRUCTURE_SCHEMA)
        assert store.apply_patches(QUESTIONS, patches) == 1

        ((query, _),) = collections[QUESTIONS].requests
        assert query == {"_id": oid}
        assert isinstance(query["_id"], ObjectId)
        assert collections[QUESTIONS].documents[0]["points"] == 1
        assert collections[QUESTIONS].documents[0]["orderIndex"] == 0

    def test_second_pass_finds_nothing(self, mongo):
        store, collections = mongo
        collections[QUESTIONS].documents.append({"_id": ObjectId(), "question": "x"})
        normalizer = RecordNormalizer()

        patches = normalizer.normalize_collection(store.list_records(QUESTIONS), QUESTION_STRUCTURE_SCHEMA)
        store.apply_patches(QUESTIONS, patches)
        assert normalizer.normalize_collection(store.list_records(QUESTIONS), QUESTION_STRUCTURE_SCHEMA) == []

    def test_string_ids_used_as_is(self, mongo):
        store, collections = mongo
        collections["lessons"].documents.append({"_id": "lesson_1"})
        store.list_records("lessons")

        assert store.apply_patches("lessons", [Patch("lesson_1", {"xpReward": 10})]) == 1
        assert collections["lessons"].requests == [({"_id": "lesson_1"}, {"$set": {"xpReward": 10}})]

    def test_returns_matched_count(self, mongo):
        store, collections = mongo
        collections["lessons"].documents.append({"_id": "lesson_1"})
        store.list_records("lessons")

        applied = store.apply_patches("lessons", [Patch("lesson_1", {"xpReward": 10}), Patch("ghost", {"xpReward": 10})])
        assert applied == 1

    def test_ids_are_scoped_per_collection(self, mongo):
        store, collections = mongo
        oid = ObjectId()
        collections["lessons"].documents.append({"_id": oid})
        store.list_records("lessons")

        store.apply_patches("courses", [Patch(str(oid), {"rating": 0.0})])
        assert collections["courses"].requests[0][0] == {"_id": str(oid)}

    def test_list_subrecords_reads_dotted_collection(self, mongo):
        store, collections = mongo
        collections[QUESTIONS].documents.append({"_id": "q1", "question": "x"})

        records = store.list_subrecords("quizzes", "quiz_1", "questions")
        assert [record.id for record in records] == ["q1"]
        assert dict(records[0].fields) == {"question": "x"}

    def test_set_document_uses_stored_id(self, mongo):
        store, collections = mongo
        oid = ObjectId()
        collections["lessons"].documents.append({"_id": oid, "title": "Old"})
        store.list_records("lessons")

        store.set_document("lessons", str(oid), {"_id": str(oid), "title": "New"})
        assert collections["lessons"].replaced == [({"_id": oid}, {"title": "New"}, True)]

    def test_set_document_new_id(self, mongo):
        store, collections = mongo
        store.set_document("lessons", "lesson_9", {"title": "New"})
        assert collections["lessons"].replaced == [({"_id": "lesson_9"}, {"title": "New"}, True)]


class TestBatchApplier:
    def test_applies_one_batch(self, store):
        store.add("lessons", "l1", {})
        store.add("lessons", "l2", {})
        result = BatchApplier(store).apply("lessons", [Patch("l1", {"xpReward": 10}), Patch("l2", {"videoUrl": ""})])

        assert result.patches_applied == 2
        assert result.record_ids == ["l1", "l2"]
        assert len(store.commits) == 1
        assert store.body("lessons", "l1") == {"xpReward": 10}

    def test_empty_batch_skips_store(self, store):
        result = BatchApplier(store).apply("lessons", [])
        assert result.patches_applied == 0
        assert store.commits == []

    def test_dry_run_writes_nothing(self, store):
        store.add("lessons", "l1", {})
        result = BatchApplier(store, dry_run=True).apply("lessons", [Patch("l1", {"xpReward": 10})])

        assert result.dry_run
        assert result.patches_applied == 1
        assert store.commits == []
        assert store.body("lessons", "l1") == {}

    def test_commit_failure_surfaces(self, store):
        store.add("lessons", "l1", {})
        store.fail_on_commit = BulkWriteError({"writeErrors": [], "nInserted": 0})
        with pytest.raises(BulkWriteError):
            BatchApplier(store).apply("lessons", [Patch("l1", {"xpReward": 10})])
