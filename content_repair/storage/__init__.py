# ==============================================
# STORAGE (MongoDB)
# ==============================================
#
# This package handles all document store operations:
# connecting, reading collection snapshots, and committing
# batches of patches.
#
# Modules:
# --------
# - mongo_client.py    → MongoDB connection and operations
# - batch_applier.py   → Commits one batch of patches per collection scan
#
# ==============================================

from .mongo_client import MongoDocumentStore, subcollection_name
from .batch_applier import BatchApplier, ApplyResult

__all__ = [
    "MongoDocumentStore",
    "subcollection_name",
    "BatchApplier",
    "ApplyResult",
]
