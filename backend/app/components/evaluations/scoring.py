"""Answer scoring and maturity levels for self-assessment evaluations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from ...models.evaluation import EvaluationType


def score_answers(answers: Mapping[str, int]) -> int:
    """Sum every answer value. Ranges are not validated; an empty mapping scores 0."""
    return sum(answers.values())


@dataclass(frozen=True)
class MaturityLevel:
    level: int
    label: str
    advice: str

    def as_dict(self) -> dict:
        return {"level": self.level, "label": self.label, "advice": self.advice}


_LABELS = {
    1: "Initial / Ad-hoc",
    2: "Repeatable but intuitive",
    3: "Defined",
    4: "Managed and measured",
    5: "Optimized",
}

# Upper bound (inclusive) of levels 1-4; anything above is level 5.
_THRESHOLDS = {
    EvaluationType.INITIAL: (9, 19, 29, 39),
    EvaluationType.ADVANCED: (20, 45, 68, 88),
}

_ADVICE = {
    EvaluationType.INITIAL: {
        1: "Establish basic controls and document your security policies.",
        2: "Formalize existing processes and make your controls consistent.",
        3: "Optimize how controls are applied and improve oversight.",
        4: "Add advanced monitoring and automate your security processes.",
        5: "Keep your level and evolve with emerging threats.",
    },
    EvaluationType.ADVANCED: {
        1: "Implement baseline controls aligned with ISO 27001 and NIST.",
        2: "Standardize and document policies and apply them consistently.",
        3: "Measure controls with continuous monitoring and metrics.",
        4: "Strengthen threat intelligence and automate incident response.",
        5: "Keep innovating and maintain advanced strategies against emerging threats.",
    },
}


def maturity_level(evaluation_type: EvaluationType, score: int) -> MaturityLevel:
    thresholds = _THRESHOLDS[EvaluationType(evaluation_type)]
    level = 5
    for index, upper in enumerate(thresholds, start=1):
        if score <= upper:
            level = index
            break
    return MaturityLevel(
        level=level,
        label=_LABELS[level],
        advice=_ADVICE[EvaluationType(evaluation_type)][level],
    )
