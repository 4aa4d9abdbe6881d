"""Utilities for importing quizzes from a human-friendly text file.

File format (repeat blocks separated by blank lines or '---'):

    TOPIC: Quiz title          (optional, once, before the first question)
    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    a: First option text
    b: Second option text
    c: Third option text
    CORRECT: b
    EXPLANATION: Why b is right (optional, may continue on following lines)
    SUBJECT: Mathematics       (optional)

Option keys are single letters or digits and keep their case, so they match
the keys a remote quiz set would use.

Example:

    TOPIC: Integers

    Q: What is $2 + 2$?
    a: 3
    b: 4
    c: 5
    CORRECT: b
    EXPLANATION: Two plus two is four.
"""

from __future__ import annotations

from pathlib import Path

from quiz_runner.constants.quiz_constants import MIN_OPTIONS_PER_QUESTION
from quiz_runner.core.errors import QuizImportError
from quiz_runner.core.models import Question, QuizSet

_FIELD_MARKERS = ("CORRECT:", "EXPLANATION:", "SUBJECT:")


def load_quiz_from_file(file_path: Path) -> QuizSet:
    text = file_path.read_text(encoding="utf-8")
    topic, questions = _parse_quiz_text(text)
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return QuizSet(
        id=file_path.stem,
        topic=topic or file_path.stem,
        questions=tuple(questions),
    )


def _parse_quiz_text(text: str) -> tuple[str | None, list[Question]]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    topic: str | None = None
    questions: list[Question] = []
    for block in blocks:
        if block.upper().startswith("TOPIC:"):
            if topic is not None or questions:
                raise QuizImportError("TOPIC may only appear once, before the first question.")
            first_line, _, block = block.partition("\n")
            topic = first_line.split(":", 1)[1].strip()
            if not block.strip():
                continue
        questions.append(_parse_block(block, position=len(questions) + 1))
    return topic, questions


def _parse_block(block: str, position: int) -> Question:
    question_lines: list[str] = []
    explanation_lines: list[str] = []
    options: dict[str, str] = {}
    correct_key: str | None = None
    subject = ""
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_key = line.split(":", 1)[1].strip()
            current_section = None
            continue

        if upper.startswith("EXPLANATION:"):
            explanation_lines = [line.split(":", 1)[1].strip()]
            current_section = "EXPLANATION"
            continue

        if upper.startswith("SUBJECT:"):
            subject = line.split(":", 1)[1].strip()
            current_section = None
            continue

        if len(line) > 2 and line[0].isalnum() and line[1] == ":" and not upper.startswith(_FIELD_MARKERS):
            key = line[0]
            if key in options:
                raise QuizImportError(f"Option '{key}' is defined twice in question {position}.")
            options[key] = line[2:].strip()
            current_section = key
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section == "EXPLANATION":
            explanation_lines.append(line)
        elif current_section in options:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError(f"Question text missing (Q: ...) in question {position}.")
    if len(options) < MIN_OPTIONS_PER_QUESTION:
        raise QuizImportError(
            f"Question {position} must define at least {MIN_OPTIONS_PER_QUESTION} options."
        )
    cleaned_options = {key: text.strip() for key, text in options.items()}
    if any(not text for text in cleaned_options.values()):
        raise QuizImportError("Option text cannot be empty.")
    if correct_key is None:
        raise QuizImportError(f"Question {position} is missing a CORRECT line.")
    if correct_key not in cleaned_options:
        raise QuizImportError(
            f"CORRECT must be one of {', '.join(cleaned_options)} in question {position}."
        )

    return Question(
        id=str(position),
        question_text=question_text,
        options=cleaned_options,
        correct_answer=correct_key,
        explanation="\n".join(explanation_lines).strip(),
        subject=subject,
    )
