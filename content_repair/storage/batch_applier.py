# ==============================================
# BatchApplier
# ==============================================
#
# PURPOSE:
#   Commit the patches computed for one collection (or one
#   sub-collection, e.g. one quiz's questions) as a single
#   batched write, and report what was written.
#
# CLASS: BatchApplier
# -------------------
#   - __init__(store, dry_run=False)
#   - apply(collection_name, patches) -> ApplyResult
#       Empty input → no remote call.
#       dry_run     → nothing is written, counts are still reported.
#       A failed commit raises; the caller decides what happens next.
#
# DATA CLASS: ApplyResult
# -----------------------
#   - collection: str
#   - patches_applied: int
#   - record_ids: list[str]
#   - dry_run: bool
#
# ==============================================

from dataclasses import dataclass, field
from typing import List, Sequence

from ..normalization.record import Patch


@dataclass
class ApplyResult:
    collection: str
    patches_applied: int = 0
    record_ids: List[str] = field(default_factory=list)
    dry_run: bool = False


class BatchApplier:
    def __init__(self, store, dry_run: bool = False):
        self.store = store
        self.dry_run = dry_run

    def apply(self, collection_name: str, patches: Sequence[Patch]) -> ApplyResult:
        patches = list(patches)
        result = ApplyResult(
            collection=collection_name,
            record_ids=[patch.record_id for patch in patches],
            dry_run=self.dry_run,
        )

        if not patches:
            return result

        if self.dry_run:
            result.patches_applied = len(patches)
            print(f"   → [dry run] would update {len(patches)} records in '{collection_name}'")
            return result

        result.patches_applied = self.store.apply_patches(collection_name, patches)
        print(f"   ✓ Committed {result.patches_applied} updates to '{collection_name}'")
        return result
