#!/usr/bin/env python3
"""Simulate assessments end-to-end through the AssessmentEngine with a mocked DB.

Each run creates a session, picks a primary concern, answers the three
follow-up questions and prints the classified result.  Runs use the
in-memory MockSessionRepository / MockAssessmentStore from the test suite,
so no database is needed.

Usage::

    # Five random runs
    python scripts/simulate_assessment.py

    # Twenty runs, every question and answer printed
    python scripts/simulate_assessment.py -n 20 -v

    # Fixed concern, reproducible answers
    python scripts/simulate_assessment.py -c "Sleep and Energy" --seed 7

    # Simulate a store outage (results are classified but not saved)
    python scripts/simulate_assessment.py --fail-store
"""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so we can import both the SDK and
# test mock infrastructure.
# ---------------------------------------------------------------------------
_SCRIPT_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _SCRIPT_DIR.parent
sys.path.insert(0, str(_REPO_ROOT / "tests"))
sys.path.insert(0, str(_REPO_ROOT / "src"))

from test_engine import MockAssessmentStore, MockSessionRepository  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

from mindcheck_assessment.engine import AssessmentEngine  # noqa: E402
from mindcheck_assessment.models.session import CompletionStep, QuestionStep  # noqa: E402
from mindcheck_assessment.question_bank import QuestionBank  # noqa: E402

USER_ID = "sim_user"

SEVERITY_STYLES = {"minor": "green", "mild": "yellow", "major": "red"}


async def run_once(
    engine: AssessmentEngine,
    session_id: str,
    rng: random.Random,
    console: Console,
    *,
    concern: str | None,
    verbose: bool,
) -> CompletionStep:
    """Drive one session from creation to completion."""
    db = AsyncMock()
    await engine.create_session(db, session_id=session_id, user_id=USER_ID)
    step = await engine.get_current_step(db, session_id=session_id, user_id=USER_ID)

    while isinstance(step, QuestionStep):
        labels = [o.label for o in step.options]
        if step.category is None and concern is not None:
            index = labels.index(concern)
        else:
            index = rng.randrange(len(labels))
        if verbose:
            console.print(
                f"  [dim]{step.question_number}/{step.total_questions}[/] "
                f"{step.question}\n    -> [cyan]{labels[index]}[/] ({index})"
            )
        step = await engine.submit_answer(
            db, session_id=session_id, option_index=index, user_id=USER_ID,
        )
    return step


async def run_simulation(
    runs: int, concern: str | None, seed: int | None, verbose: bool, fail_store: bool,
) -> int:
    console = Console()
    bank = QuestionBank().load()
    if concern is not None and concern not in bank.concerns:
        console.print(f"[red]Unknown concern:[/] {concern}")
        console.print("Choose one of: " + ", ".join(bank.concerns))
        return 2

    store = MockAssessmentStore()
    store.fail = fail_store
    engine = AssessmentEngine(bank, store)
    engine._repo = MockSessionRepository()
    rng = random.Random(seed)

    table = Table(title="Simulated Assessments", show_lines=True)
    table.add_column("#", style="dim", width=4)
    table.add_column("Primary concern", min_width=28)
    table.add_column("Severity", width=9)
    table.add_column("Score", width=6)
    table.add_column("Saved", width=6)
    table.add_column("Recommendation", min_width=40)

    for i in range(1, runs + 1):
        if verbose:
            console.print(f"\n[bold cyan][{i}/{runs}][/] session sim_{i}")
        result = await run_once(
            engine, f"sim_{i}", rng, console, concern=concern, verbose=verbose,
        )
        style = SEVERITY_STYLES[result.severity.level]
        saved = "[green]yes[/]" if result.saved else "[red]no[/]"
        table.add_row(
            str(i),
            result.primary_concern,
            f"[{style}]{result.severity.level}[/]",
            str(result.severity.score),
            saved,
            result.recommendations,
        )

    console.print()
    console.print(table)
    console.print(f"  Stored assessments: {len(store.assessments)}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Simulate assessments through the AssessmentEngine with a mocked DB.",
    )
    parser.add_argument("-n", "--runs", type=int, default=5, help="Number of sessions (default: 5)")
    parser.add_argument(
        "-c", "--concern",
        default=None,
        help="Primary concern label to always pick (default: random)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print every question and the chosen answer",
    )
    parser.add_argument(
        "--fail-store",
        action="store_true",
        help="Make every assessment save fail",
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(
        run_simulation(args.runs, args.concern, args.seed, args.verbose, args.fail_store)
    ))


if __name__ == "__main__":
    main()
