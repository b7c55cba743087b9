"""Reference data endpoints — the question bank, concerns, severity levels.

Read-only; no user identity required.
"""

from fastapi import APIRouter, Depends

from mindcheck_assessment.composer import CONCERN_SENTENCES, SEVERITY_SENTENCES
from mindcheck_assessment.constants import MILD_MAX_MEAN, MINOR_MAX_MEAN, SEVERITY_ORDER
from mindcheck_assessment.models.question import Question
from mindcheck_assessment.question_bank import QuestionBank

from mindcheck_server.dependencies import get_bank

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/questions")
async def list_questions(bank: QuestionBank = Depends(get_bank)) -> list[Question]:
    """Every question in the bank, root first."""
    root = bank.root
    return [root] + [q for qid, q in bank.questions.items() if qid != root.qid]


@router.get("/concerns")
async def list_concerns(bank: QuestionBank = Depends(get_bank)) -> list[dict]:
    """Concern categories offered by the root question."""
    return [
        {
            "concern": concern,
            "branch": bank.branch_for(concern),
            "recommendation": CONCERN_SENTENCES.get(concern, ""),
        }
        for concern in bank.concerns
    ]


@router.get("/severity-levels")
async def list_severity_levels() -> list[dict]:
    """Severity levels in ascending order with their mean thresholds."""
    upper = {"minor": MINOR_MAX_MEAN, "mild": MILD_MAX_MEAN, "major": None}
    return [
        {
            "level": level,
            "max_mean": upper[level],
            "recommendation": SEVERITY_SENTENCES[level],
        }
        for level in SEVERITY_ORDER
    ]
