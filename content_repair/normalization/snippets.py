# ==============================================
# SnippetCatalog
# ==============================================
#
# PURPOSE:
#   Restore the `codeSnippet` field of quiz questions that were
#   seeded without one. The snippets are looked up in a JSON
#   catalog keyed by quiz title, then by question text.
#
# CATALOG FORMAT:
# ---------------
#   {
#     "<quiz title>": {
#       "<question text>": {"codeSnippet": "...", "correctAnswer": "..."},
#       "<shared question text>": [
#         {"questionText": "...", "codeSnippet": "...", "correctAnswer": "..."},
#         ...
#       ]
#     }
#   }
#
#   Several questions in one quiz may share the same text
#   ("What is the output?"). For those, the first entry whose
#   questionText prefix (20 chars) appears in the question, or whose
#   correctAnswer equals the question's, wins.
#
# A question is only patched when its codeSnippet is absent, null
# or "". Existing snippets are never replaced.
#
# ==============================================

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .record import Patch, Record
from .value_kinds import MISSING, ValueKind, detect

DEFAULT_CATALOG_PATH = Path(__file__).parent.parent / "data" / "quiz_snippets.json"

PREFIX_LENGTH = 20


class SnippetCatalog:
    """Lookup table of code snippets for quiz questions."""

    def __init__(self, entries: Dict[str, Dict[str, Any]]):
        self._validate(entries)
        self._entries = entries

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "SnippetCatalog":
        """
        Load a catalog from a JSON file.

        Args:
            path: Catalog file. Defaults to the bundled quiz_snippets.json.

        Returns:
            SnippetCatalog

        Raises:
            ValueError: if the file is not valid JSON or has the wrong shape
        """
        path = Path(path) if path else DEFAULT_CATALOG_PATH
        with open(path, "r", encoding="utf-8") as f:
            try:
                entries = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Snippet catalog {path} is not valid JSON: {e}") from e
        return cls(entries)

    @property
    def quiz_titles(self) -> List[str]:
        return list(self._entries.keys())

    def covers(self, quiz: Record) -> bool:
        title = quiz.get("title")
        return detect(title) is ValueKind.STRING and title in self._entries

    def snippet_for(self, quiz: Record, question: Record) -> Any:
        """Return the catalog snippet for a question, or MISSING."""
        if not self.covers(quiz):
            return MISSING

        text = question.get("question")
        if detect(text) is not ValueKind.STRING:
            return MISSING

        info = self._entries[quiz.get("title")].get(text)
        if info is None:
            return MISSING

        if isinstance(info, list):
            info = self._match_shared_text(info, text, question.get("correctAnswer"))
            if info is None:
                return MISSING

        return info.get("codeSnippet") or MISSING

    def compute_patches(self, quiz: Record, questions: Iterable[Record]) -> List[Patch]:
        patches = []
        for question in questions:
            if not self._needs_snippet(question):
                continue
            snippet = self.snippet_for(quiz, question)
            if snippet is not MISSING:
                patches.append(Patch(question.id, {"codeSnippet": snippet}))
        return patches

    def _needs_snippet(self, question: Record) -> bool:
        current = question.get("codeSnippet")
        return current is MISSING or current is None or current == ""

    def _match_shared_text(self, candidates: list, text: str, correct_answer: Any) -> Optional[dict]:
        for info in candidates:
            prefix = info.get("questionText", "")[:PREFIX_LENGTH]
            if (prefix and prefix in text) or info.get("correctAnswer") == correct_answer:
                return info
        return None

    @staticmethod
    def _validate(entries: Any) -> None:
        if not isinstance(entries, dict):
            raise ValueError("Snippet catalog must map quiz titles to question tables")

        for title, questions in entries.items():
            if not isinstance(questions, dict):
                raise ValueError(f"Snippet catalog entry for quiz '{title}' must be an object")
            for text, info in questions.items():
                infos = info if isinstance(info, list) else [info]
                for item in infos:
                    if not isinstance(item, dict) or not isinstance(item.get("codeSnippet"), str):
                        raise ValueError(
                            f"Snippet catalog entry '{title}' / '{text}' needs a string codeSnippet"
                        )
