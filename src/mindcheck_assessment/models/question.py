"""Question model for the assessment question bank.

Two kinds of question live in the bank:

  - the root question: no category, a ``next_questions`` mapping from each
    option label to the ordered follow-up qids of one branch
  - branch questions: exactly one category, no ``next_questions``

Answers are recorded as 0-based option indices, so ``options`` order matters.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

Category = Literal["mood", "anxiety", "sleep", "social", "work"]


class Question(BaseModel):
    """A single question with its selectable options."""

    model_config = ConfigDict(frozen=True)

    qid: str
    question: str
    options: List[str]
    next_questions: Optional[Dict[str, List[str]]] = None
    category: Optional[Category] = None

    @field_validator("options")
    @classmethod
    def _non_empty_options(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("a question needs at least one option")
        if len(set(v)) != len(v):
            raise ValueError("option labels must be unique")
        return v

    @model_validator(mode="after")
    def _chk(self):
        if self.next_questions is not None:
            if self.category is not None:
                raise ValueError(f"branching question '{self.qid}' must not have a category")
            unknown = set(self.next_questions) - set(self.options)
            if unknown:
                raise ValueError(
                    f"'{self.qid}' maps labels that are not options: {sorted(unknown)}"
                )
        elif self.category is None:
            raise ValueError(f"question '{self.qid}' has neither a category nor branches")
        return self

    @property
    def is_root(self) -> bool:
        """True for the branching question that starts every assessment."""
        return self.next_questions is not None

    def option_label(self, index: int) -> str:
        """Label of the option at ``index`` (caller validates the range)."""
        return self.options[index]
