# ==============================================
# Content Repair Toolkit
# ==============================================
#
# Package Structure:
#
# content_repair/
# ├── normalization/    # Pure engine: classify records, compute patches
# ├── storage/          # MongoDB document store + batch applier
# ├── analysis/         # Read-only integrity checks
# ├── data/             # Bundled quiz snippet catalog
# ├── config.py         # Configuration management
# ├── repair_jobs.py    # Job definitions and the RepairRunner orchestrator
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
