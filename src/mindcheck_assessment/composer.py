"""Recommendation composer and severity-keyed follow-up resources.

The recommendation is the severity sentence followed by the concern
sentence, joined by a single space.  Both tables are fixed literals.
"""

from __future__ import annotations

from typing import Any

from mindcheck_assessment.errors import UnknownConcern
from mindcheck_assessment.models.result import SeverityLevel

SEVERITY_SENTENCES: dict[str, str] = {
    "minor": "Consider incorporating mindfulness and relaxation techniques into your daily routine.",
    "mild": (
        "Regular exercise and stress management techniques may be helpful. "
        "Consider scheduling a consultation."
    ),
    "major": "We strongly recommend scheduling a session with one of our professional counselors.",
}

CONCERN_SENTENCES: dict[str, str] = {
    "Mood and Emotions": (
        "Focus on activities that bring you joy and maintain a regular daily routine."
    ),
    "Anxiety and Stress": (
        "Practice deep breathing exercises and progressive muscle relaxation."
    ),
    "Sleep and Energy": "Establish a consistent sleep schedule and bedtime routine.",
    "Social Relationships": (
        "Gradually increase social interactions and maintain connections with loved ones."
    ),
    "Work or Academic Performance": (
        "Break tasks into smaller, manageable pieces and take regular breaks."
    ),
}

# What the results page offers next for each severity level.
SEVERITY_RESOURCES: dict[str, dict[str, Any]] = {
    "minor": {
        "kind": "chat",
        "title": "AI Chat Support",
        "topics": [
            "Basic coping strategies",
            "Mindfulness exercises",
            "Stress management techniques",
            "General mental wellness tips",
        ],
    },
    "mild": {
        "kind": "videos",
        "title": "Recommended Videos",
        "videos": [
            {
                "title": "Understanding Anxiety",
                "url": "https://www.youtube.com/watch?v=WWloIAQpMcQ",
            },
            {
                "title": "Mindfulness Meditation",
                "url": "https://www.youtube.com/watch?v=ZToicYcHIOU",
            },
            {
                "title": "Stress Management Techniques",
                "url": "https://www.youtube.com/watch?v=0fL-pn80s-c",
            },
        ],
    },
    "major": {
        "kind": "counselor",
        "title": "Professional Support",
        "message": (
            "Based on your assessment, we recommend speaking with a professional counselor."
        ),
    },
}


def compose_recommendation(level: SeverityLevel, concern: str) -> str:
    """Recommendation text for a severity level and primary concern.

    Raises:
        UnknownConcern: if ``concern`` is not one of the canonical root labels.
        KeyError: if ``level`` is not a severity level.
    """
    specific = CONCERN_SENTENCES.get(concern)
    if specific is None:
        raise UnknownConcern(concern)
    return f"{SEVERITY_SENTENCES[level]} {specific}"


def resources_for(level: SeverityLevel) -> dict[str, Any]:
    """Copy of the follow-up resources offered for ``level``."""
    resource = SEVERITY_RESOURCES[level]
    return {k: (list(v) if isinstance(v, list) else v) for k, v in resource.items()}
