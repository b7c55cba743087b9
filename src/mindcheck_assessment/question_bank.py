"""QuestionBank — loads the assessment questions from YAML into typed models.

This is the single source of truth for question data at runtime.  The bank
is loaded once at startup, validated as a whole, and never mutated
afterwards.

Usage::

    bank = QuestionBank()          # defaults to data/question_bank.yaml
    bank.load()                    # parse + validate

    root = bank.root
    branch = bank.branch_for("Sleep and Energy")   # ["sleep-1", ...]
    q = bank.lookup("sleep-2")
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from mindcheck_assessment.constants import BRANCH_LENGTH, ROOT_QID
from mindcheck_assessment.errors import (
    QuestionBankError,
    QuestionNotFound,
    UnknownConcern,
)
from mindcheck_assessment.models.question import Question

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


class QuestionBank:
    """Immutable mapping of qid -> Question, populated by :meth:`load`.

    Args:
        path: YAML file to read; defaults to the packaged question bank.
        root_qid: identifier of the branching root question.
    """

    def __init__(self, path: str | Path | None = None, *, root_qid: str = ROOT_QID) -> None:
        self._path = Path(path) if path is not None else DATA_DIR / "question_bank.yaml"
        self._root_qid = root_qid
        self._questions: dict[str, Question] = {}
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> QuestionBank:
        """Parse and validate the YAML file.  Call once at startup.

        Raises ``QuestionBankError`` if the data is malformed and
        ``FileNotFoundError`` if the file is missing.
        """
        if self._loaded:
            return self
        raw = load_yaml(self._path)
        self.load_from(raw)
        logger.info(
            "QuestionBank loaded: %d questions, %d concerns from %s",
            len(self._questions),
            len(self.concerns),
            self._path,
        )
        return self

    def load_from(self, raw: Any) -> QuestionBank:
        """Populate the bank from already-parsed data (list of question dicts)."""
        if self._loaded:
            raise QuestionBankError("QuestionBank is already loaded")
        if not isinstance(raw, list):
            raise QuestionBankError("question bank must be a list of questions")

        parsed: dict[str, Question] = {}
        for q_dict in raw:
            try:
                q = Question(**q_dict)
            except (TypeError, ValidationError) as exc:
                raise QuestionBankError(f"Invalid question entry {q_dict!r}: {exc}") from exc
            if q.qid in parsed:
                raise QuestionBankError(f"Duplicate qid '{q.qid}'")
            parsed[q.qid] = q

        self._validate(parsed)
        self._questions = parsed
        self._loaded = True
        return self

    def _validate(self, questions: dict[str, Question]) -> None:
        """Check the cross-question invariants the state machine relies on."""
        root = questions.get(self._root_qid)
        if root is None:
            raise QuestionBankError(f"Root question '{self._root_qid}' is missing")
        if not root.is_root:
            raise QuestionBankError(f"Root question '{self._root_qid}' has no branch mapping")

        for qid, q in questions.items():
            if q.is_root and qid != self._root_qid:
                raise QuestionBankError(f"Only '{self._root_qid}' may branch, found '{qid}'")

        for label in root.options:
            targets = root.next_questions.get(label)
            if not targets:
                raise QuestionBankError(f"Root option '{label}' has no follow-up questions")
            if len(targets) != BRANCH_LENGTH:
                raise QuestionBankError(
                    f"Root option '{label}' maps to {len(targets)} questions, "
                    f"expected {BRANCH_LENGTH}"
                )
            categories = set()
            for target in targets:
                q = questions.get(target)
                if q is None:
                    raise QuestionBankError(
                        f"Root option '{label}' references unknown qid '{target}'"
                    )
                categories.add(q.category)
            if len(categories) != 1:
                raise QuestionBankError(
                    f"Branch '{label}' mixes categories: {sorted(categories)}"
                )

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise QuestionBankError("QuestionBank.load() has not been called")

    def lookup(self, qid: str) -> Question:
        """Return the question for ``qid``.

        Raises:
            QuestionNotFound: if the identifier is absent.
        """
        self._require_loaded()
        try:
            return self._questions[qid]
        except KeyError:
            raise QuestionNotFound(qid) from None

    def __contains__(self, qid: object) -> bool:
        return qid in self._questions

    @property
    def root(self) -> Question:
        """The branching question every assessment starts on."""
        return self.lookup(self._root_qid)

    @property
    def root_qid(self) -> str:
        return self._root_qid

    @property
    def concerns(self) -> list[str]:
        """Root option labels in display order."""
        if not self._loaded:
            return []
        return list(self.root.options)

    @property
    def questions(self) -> Mapping[str, Question]:
        """Read-only view of every question keyed by qid."""
        self._require_loaded()
        return MappingProxyType(self._questions)

    def branch_for(self, concern: str) -> list[str]:
        """Ordered follow-up qids for a primary concern (exact label match).

        Raises:
            UnknownConcern: if ``concern`` is not a root option label.
        """
        targets = self.root.next_questions.get(concern)
        if targets is None:
            raise UnknownConcern(concern)
        return list(targets)

    def category_of(self, qid: str) -> str | None:
        """Category of ``qid``; None for the root."""
        return self.lookup(qid).category
