# ==============================================
# ANALYSIS
# ==============================================
#
# Read-only checks over the stored content.
#
# Modules:
# --------
# - integrity.py → Reports records missing fields that cannot be defaulted
#
# ==============================================

from .integrity import IntegrityChecker, IntegrityIssue

__all__ = ["IntegrityChecker", "IntegrityIssue"]
