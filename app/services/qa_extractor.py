"""
Question/answer extraction from LLM completions.

The completion is expected to follow the format requested by
``app.services.llm.QUESTIONS_PROMPT``::

    Q1: <question>
    A: <answer>

Only the marker matters, never the ordinal. Anything that does not fit the
pattern (preamble, trailing prose, a question with no answer line) is skipped.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple, Union

# Question and answer bodies are single-line and lazy: an answer that wraps
# onto a second line is cut at the first line break.
QA_PATTERN = re.compile(r"Q\d+:[^\S\n]+(.+?)\nA:[^\S\n]+(.+?)(?:\n|$)")


@dataclass(frozen=True)
class QuestionAnswer:
    question: str
    answer: str

    def to_dict(self) -> Dict[str, str]:
        return {"question": self.question, "answer": self.answer}


@dataclass(frozen=True)
class Extracted:
    pairs: Tuple[QuestionAnswer, ...]

    def to_list(self) -> List[Dict[str, str]]:
        return [pair.to_dict() for pair in self.pairs]


@dataclass(frozen=True)
class NoQuestionsExtracted:
    raw_text: str


ExtractionOutcome = Union[Extracted, NoQuestionsExtracted]


def extract(raw_text: str) -> ExtractionOutcome:
    pairs: List[QuestionAnswer] = []
    for match in QA_PATTERN.finditer(raw_text or ""):
        question = match.group(1).strip()
        answer = match.group(2).strip()
        if question and answer:
            pairs.append(QuestionAnswer(question=question, answer=answer))
    if not pairs:
        return NoQuestionsExtracted(raw_text=raw_text or "")
    return Extracted(pairs=tuple(pairs))


def render(pairs: Iterable[QuestionAnswer]) -> str:
    """Render pairs back into the canonical completion format."""
    lines = []
    for n, pair in enumerate(pairs, start=1):
        lines.append(f"Q{n}: {pair.question}")
        lines.append(f"A: {pair.answer}")
    return "\n".join(lines) + "\n" if lines else ""
