from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


OPTION_COUNT = 4


class ExerciseSuggestion(BaseModel):
    topic: str
    difficulty: Literal["Easy", "Medium", "Advanced"]
    count: int = Field(ge=0)
    description: str


class Question(BaseModel):
    id: int = 0
    question: str
    options: List[str] = Field(min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    correct_answer: int = Field(alias="correctAnswer", ge=0)
    explanation: str = ""

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _answer_in_options(self) -> "Question":
        if self.correct_answer >= len(self.options):
            raise ValueError(f"correctAnswer {self.correct_answer} is out of range")
        return self


class Quiz(BaseModel):
    topic: str
    questions: List[Question] = Field(default_factory=list)


def option_letter(index: int) -> str:
    return chr(ord("A") + index)


@dataclass
class QuizRun:
    quiz: Quiz
    step: int = 0
    score: int = 0
    selected: Optional[int] = None
    showing_result: bool = False

    @property
    def current(self) -> Question:
        return self.quiz.questions[self.step]

    @property
    def total(self) -> int:
        return len(self.quiz.questions)

    @property
    def finished(self) -> bool:
        return self.total == 0 or self.step >= self.total

    def select(self, index: int) -> None:
        if not self.showing_result and not self.finished:
            self.selected = index

    def answer(self) -> Optional[bool]:
        if self.selected is None or self.showing_result or self.finished:
            return None
        correct = self.selected == self.current.correct_answer
        if correct:
            self.score += 1
        self.showing_result = True
        return correct

    def next_step(self) -> None:
        if self.finished:
            return
        self.step += 1
        self.selected = None
        self.showing_result = False


def export_quiz_text(quiz: Quiz, student_name: str, class_name: str) -> str:
    lines = [
        f"ĐỀ LUYỆN TẬP: {quiz.topic}",
        f"Học sinh: {student_name} - Lớp: {class_name}",
        "Hệ thống: Hurricane AI",
        "-" * 42,
        "",
    ]
    for i, q in enumerate(quiz.questions, start=1):
        lines.append(f"Câu {i}: {q.question}")
        for idx, opt in enumerate(q.options):
            lines.append(f"   {option_letter(idx)}. {opt}")
        lines.append("")
    lines.append("-" * 42)
    lines.append("ĐÁP ÁN & GIẢI THÍCH")
    for i, q in enumerate(quiz.questions, start=1):
        lines.append(f"Câu {i}: {option_letter(q.correct_answer)}")
        lines.append(f"Giải thích: {q.explanation}")
        lines.append("")
    return "\n".join(lines) + "\n"


def export_file_name(quiz: Quiz) -> str:
    slug = re.sub(r"\s+", "_", quiz.topic)
    return f"HurricaneAI_Quiz_{slug}.txt"
