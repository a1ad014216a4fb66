# ==============================================
# MongoDocumentStore
# ==============================================
#
# PURPOSE:
#   Manages the MongoDB connection and every read/write the
#   repair jobs make against the content database.
#
# LAYOUT:
#   - Top-level collections: "courses", "lessons", "quizzes", ...
#   - Sub-collections of a parent document live in a collection
#     named "<parent_collection>.<parent_id>.<sub_collection>",
#     e.g. "quizzes.python_basics_quiz.questions".
#   - The record id is str(_id). The _id value as read (an ObjectId
#     for documents inserted without one) is kept and used to address
#     the document on write.
#
# CLASS: MongoDocumentStore
# -------------------------
#   Stateful — holds the connection.
#
#   Constructor:
#   ------------
#   - __init__(host, port, database, user=None, password=None, uri=None)
#
#   Methods:
#   --------
#   - connect() / disconnect()
#   - list_records(collection) -> list[Record]
#   - list_subrecords(parent_collection, parent_id, sub_collection) -> list[Record]
#   - apply_patches(collection, patches) -> int
#       One bulk_write of UpdateOne($set / $currentDate) per call.
#       Returns the number of documents the batch matched.
#   - set_document(collection, record_id, body) -> None
#       Replace the full body (upsert). Used for seeding only.
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with MongoDocumentStore(...) as store:` usage.
#
#   Remote errors (pymongo.errors.PyMongoError) are not caught here.
#
# ==============================================

from typing import Any, Dict, List, Sequence, Tuple

from pymongo import MongoClient as PyMongoClient
from pymongo import UpdateOne
from pymongo.errors import ConnectionFailure, OperationFailure

from ..normalization.record import Patch, Record
from ..normalization.schemas import SERVER_TIMESTAMP


def subcollection_name(parent_collection: str, parent_id: str, sub_collection: str) -> str:
    return f"{parent_collection}.{parent_id}.{sub_collection}"


def build_update(patch: Patch) -> Dict[str, Dict[str, Any]]:
    """
    Translate a patch into a MongoDB update document.

    SERVER_TIMESTAMP values become ``$currentDate`` so the server's
    clock stamps them.
    """
    to_set = {}
    to_stamp = {}
    for field_name, value in patch.changes.items():
        if value is SERVER_TIMESTAMP:
            to_stamp[field_name] = True
        else:
            to_set[field_name] = value

    update = {}
    if to_set:
        update["$set"] = to_set
    if to_stamp:
        update["$currentDate"] = to_stamp
    return update


class MongoDocumentStore:
    def __init__(self, host="localhost", port=27017, database="content_db", user=None, password=None, uri=None):
        # Store connection params. Don't connect yet.
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.uri = uri
        self.client = None
        # (collection, str id) -> _id as stored (str, ObjectId, ...)
        self._stored_ids: Dict[Tuple[str, str], Any] = {}

    def connect(self):
        try:
            if self.uri:
                uri = self.uri
            elif self.user and self.password:
                uri = f"mongodb://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"
            else:
                uri = f"mongodb://{self.host}:{self.port}/{self.database}"
            self.client = PyMongoClient(uri)
            # Test connection
            self.client.admin.command('ping')
            print(f"✓ Connected to MongoDB database '{self.database}'.")
        except ConnectionFailure as e:
            print(f"✗ Could not connect to MongoDB: {e}")
            raise
        except OperationFailure as e:
            print(f"✗ Authentication failed: {e}")
            raise

    def disconnect(self):
        if self.client:
            self.client.close()
            print("✓ Disconnected from MongoDB.")
            self.client = None

    def list_records(self, collection_name: str) -> List[Record]:
        collection = self._collection(collection_name)
        records = []
        for document in collection.find({}):
            record = self._to_record(document)
            self._stored_ids[(collection_name, record.id)] = document["_id"]
            records.append(record)
        return records

    def list_subrecords(self, parent_collection: str, parent_id: str, sub_collection: str) -> List[Record]:
        return self.list_records(subcollection_name(parent_collection, parent_id, sub_collection))

    def apply_patches(self, collection_name: str, patches: Sequence[Patch]) -> int:
        if not patches:
            return 0
        collection = self._collection(collection_name)
        requests = [
            UpdateOne({"_id": self._stored_id(collection_name, patch.record_id)}, build_update(patch))
            for patch in patches
        ]
        result = collection.bulk_write(requests, ordered=True)
        return result.matched_count

    def set_document(self, collection_name: str, record_id: str, body: Dict[str, Any]) -> None:
        collection = self._collection(collection_name)
        document = {key: value for key, value in body.items() if key != "_id"}
        collection.replace_one({"_id": self._stored_id(collection_name, record_id)}, document, upsert=True)

    def _stored_id(self, collection_name: str, record_id: str) -> Any:
        return self._stored_ids.get((collection_name, record_id), record_id)

    def _collection(self, collection_name: str):
        if not self.client:
            raise RuntimeError("Not connected to MongoDB.")
        return self.client[self.database][collection_name]

    @staticmethod
    def _to_record(document: Dict[str, Any]) -> Record:
        body = dict(document)
        record_id = str(body.pop("_id"))
        return Record(record_id, body)

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
