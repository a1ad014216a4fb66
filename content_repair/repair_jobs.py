# ==============================================
# RepairRunner — Orchestrator
# ==============================================
#
# PURPOSE:
#   Drives the repair jobs end to end. Users interact with this
#   class (directly or through the CLI); everything else is internal.
#
# HOW ONE SCOPE IS PROCESSED:
#
#   ┌──────────────────────────────────────────────────────────┐
#   │                      RepairRunner                        │
#   │                                                          │
#   │  MongoDocumentStore.list_records / list_subrecords       │
#   │                 │ snapshot of Records                    │
#   │                 ▼                                        │
#   │  RecordNormalizer.normalize_collection(schema)           │
#   │   (or SnippetCatalog.compute_patches)                    │
#   │                 │ list[Patch]                            │
#   │                 ▼                                        │
#   │  BatchApplier.apply  → one batch per (sub-)collection    │
#   │                 │                                        │
#   │                 ▼                                        │
#   │  ScopeResult appended to RepairSummary                   │
#   └──────────────────────────────────────────────────────────┘
#
#   Scopes run one after another; every remote call finishes
#   before the next one starts. A remote error stops the run and
#   propagates; nothing is checkpointed, so re-running starts from
#   the first collection again.
#
# JOBS:
# -----
#   - booleans        → quiz questions: boolean answer / options / type
#   - question-order  → quiz questions: orderIndex
#   - structure       → default fields on courses, achievements,
#                       user_stats, lessons, progress, quiz questions
#   - snippets        → quiz questions: codeSnippet from the catalog
#
#   `verify()` runs the read-only IntegrityChecker.
#
# ==============================================

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from content_repair.analysis.integrity import IntegrityChecker, IntegrityIssue
from content_repair.normalization.record import Patch, Record
from content_repair.normalization.record_normalizer import RecordNormalizer
from content_repair.normalization.schemas import (
    ACHIEVEMENT_SCHEMA,
    BOOLEAN_QUESTION_SCHEMA,
    COURSE_SCHEMA,
    LESSON_SCHEMA,
    PROGRESS_SCHEMA,
    QUESTION_ORDER_SCHEMA,
    QUESTION_STRUCTURE_SCHEMA,
    USER_STATS_SCHEMA,
    CanonicalSchema,
)
from content_repair.normalization.snippets import SnippetCatalog
from content_repair.storage.batch_applier import BatchApplier
from content_repair.storage.mongo_client import subcollection_name


@dataclass(frozen=True)
class RepairScope:
    """One collection (or the sub-collections under it) and how to repair it."""
    collection: str
    schema: Optional[CanonicalSchema] = None
    sub_collection: Optional[str] = None
    restore_snippets: bool = False


@dataclass(frozen=True)
class RepairJob:
    name: str
    description: str
    scopes: Tuple[RepairScope, ...]


@dataclass
class ScopeResult:
    collection: str
    inspected: int = 0
    patched: int = 0
    record_ids: List[str] = field(default_factory=list)


@dataclass
class RepairSummary:
    job: str
    dry_run: bool = False
    scopes: List[ScopeResult] = field(default_factory=list)

    @property
    def inspected(self) -> int:
        return sum(scope.inspected for scope in self.scopes)

    @property
    def patched(self) -> int:
        return sum(scope.patched for scope in self.scopes)

    def to_dict(self) -> dict:
        return {
            "job": self.job,
            "dry_run": self.dry_run,
            "inspected": self.inspected,
            "patched": self.patched,
            "scopes": [
                {
                    "collection": scope.collection,
                    "inspected": scope.inspected,
                    "patched": scope.patched,
                    "record_ids": list(scope.record_ids),
                }
                for scope in self.scopes
            ],
        }


QUESTIONS = "questions"

JOBS: Dict[str, RepairJob] = {
    "booleans": RepairJob(
        name="booleans",
        description="Standardize boolean quiz answers, options and type tags",
        scopes=(RepairScope("quizzes", BOOLEAN_QUESTION_SCHEMA, QUESTIONS),),
    ),
    "question-order": RepairJob(
        name="question-order",
        description="Give every quiz question an orderIndex",
        scopes=(RepairScope("quizzes", QUESTION_ORDER_SCHEMA, QUESTIONS),),
    ),
    "structure": RepairJob(
        name="structure",
        description="Fill missing fields with defaults across all content collections",
        scopes=(
            RepairScope("courses", COURSE_SCHEMA),
            RepairScope("achievements", ACHIEVEMENT_SCHEMA),
            RepairScope("user_stats", USER_STATS_SCHEMA),
            RepairScope("lessons", LESSON_SCHEMA),
            RepairScope("progress", PROGRESS_SCHEMA),
            RepairScope("quizzes", QUESTION_STRUCTURE_SCHEMA, QUESTIONS),
        ),
    ),
    "snippets": RepairJob(
        name="snippets",
        description="Restore missing code snippets on quiz questions",
        scopes=(RepairScope("quizzes", sub_collection=QUESTIONS, restore_snippets=True),),
    ),
}


class RepairRunner:
    """
    Runs repair jobs against a document store.

    The store only needs list_records, list_subrecords and
    apply_patches; MongoDocumentStore is the production one.
    """

    def __init__(
        self,
        store,
        normalizer: Optional[RecordNormalizer] = None,
        applier: Optional[BatchApplier] = None,
        snippet_catalog: Optional[SnippetCatalog] = None,
        integrity_checker: Optional[IntegrityChecker] = None,
        dry_run: bool = False,
    ):
        if applier is not None and dry_run:
            raise ValueError("dry_run applies to the default applier; pass BatchApplier(store, dry_run=True) instead")
        self._store = store
        self._normalizer = normalizer or RecordNormalizer()
        self._applier = applier or BatchApplier(store, dry_run=dry_run)
        self._snippet_catalog = snippet_catalog
        self._integrity_checker = integrity_checker or IntegrityChecker()

    @property
    def dry_run(self) -> bool:
        return self._applier.dry_run

    def run_job(self, job: RepairJob) -> RepairSummary:
        """
        Run every scope of one job in order.

        Args:
            job: The job to run (see JOBS)

        Returns:
            RepairSummary with per-scope counts and patched ids
        """
        print(f"\n🔧 {job.description}...")
        summary = RepairSummary(job=job.name, dry_run=self.dry_run)

        for scope in job.scopes:
            self._run_scope(scope, summary)

        print(f"✓ {job.name}: inspected {summary.inspected} records, patched {summary.patched}")
        return summary

    def run_jobs(self, names: Iterable[str]) -> List[RepairSummary]:
        jobs = [self._lookup(name) for name in names]
        return [self.run_job(job) for job in jobs]

    def verify(self) -> List[IntegrityIssue]:
        print("\n🔍 Verifying data integrity...")
        issues = self._integrity_checker.check_store(self._store)
        if not issues:
            print("✓ No data integrity issues found!")
        else:
            print(f"⚠ Found {len(issues)} issues:")
            for issue in issues:
                print(f"   - {issue}")
        return issues

    def _lookup(self, name: str) -> RepairJob:
        if name not in JOBS:
            raise KeyError(f"Unknown repair job '{name}'. Known jobs: {', '.join(JOBS)}")
        return JOBS[name]

    def _run_scope(self, scope: RepairScope, summary: RepairSummary) -> None:
        records = self._store.list_records(scope.collection)

        if scope.sub_collection is None:
            print(f"→ {scope.collection}: {len(records)} records")
            patches = self._compute_patches(scope, None, records)
            summary.scopes.append(self._commit(scope.collection, records, patches))
            return

        print(f"→ {scope.collection}: {len(records)} parents")
        for parent in records:
            label = subcollection_name(scope.collection, parent.id, scope.sub_collection)
            children = self._store.list_subrecords(scope.collection, parent.id, scope.sub_collection)
            print(f"  → {label}: {len(children)} records")

            if scope.restore_snippets and not self.snippet_catalog.covers(parent):
                print(f"    → skipped (no catalog entries for '{parent.get('title', parent.id)}')")
                summary.scopes.append(ScopeResult(collection=label, inspected=len(children)))
                continue

            patches = self._compute_patches(scope, parent, children)
            summary.scopes.append(self._commit(label, children, patches))

    def _compute_patches(self, scope: RepairScope, parent: Optional[Record], records: Sequence[Record]) -> List[Patch]:
        if scope.restore_snippets:
            return self.snippet_catalog.compute_patches(parent, records)
        return self._normalizer.normalize_collection(records, scope.schema)

    def _commit(self, label: str, records: Sequence[Record], patches: List[Patch]) -> ScopeResult:
        for patch in patches:
            print(f"    ✓ {patch.record_id}: {', '.join(patch.field_names)}")

        result = self._applier.apply(label, patches)
        if not patches:
            print("    ✓ already canonical")

        return ScopeResult(
            collection=label,
            inspected=len(records),
            patched=result.patches_applied,
            record_ids=result.record_ids,
        )

    @property
    def snippet_catalog(self) -> SnippetCatalog:
        if self._snippet_catalog is None:
            self._snippet_catalog = SnippetCatalog.load()
        return self._snippet_catalog
