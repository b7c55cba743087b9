"""SummaryRenderer — Jinja2 plain-text rendering of engine steps.

Templates live in ``templates/`` beside this module:

  - question.jinja2: one QuestionStep with numbered options
  - summary.jinja2: a CompletionStep with its severity resources
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from mindcheck_assessment.constants import MAX_SCORE
from mindcheck_assessment.models.session import CompletionStep, QuestionStep, StepResult


class SummaryRenderer:
    """Renders steps into text for the summary endpoint and CLI tools.

    Args:
        template_dir: optional override for the template directory.
            Defaults to ``templates/`` sibling of this module.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "templates"
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render_step(self, step: StepResult) -> str:
        """Dispatch on ``step.type``."""
        if isinstance(step, CompletionStep):
            return self.render_summary(step)
        return self.render_question(step)

    def render_question(self, step: QuestionStep) -> str:
        return self._env.get_template("question.jinja2").render(step=step)

    def render_summary(self, step: CompletionStep) -> str:
        template = self._env.get_template("summary.jinja2")
        return template.render(step=step, resources=step.resources, max_score=MAX_SCORE)
