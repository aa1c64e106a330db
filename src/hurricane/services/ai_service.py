from __future__ import annotations

import base64
import json
import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError
from requests import RequestException

from hurricane.config.settings import settings
from hurricane.core.quiz import ExerciseSuggestion, Quiz

logger = logging.getLogger(__name__)

SUGGESTION_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "topic": {"type": "STRING"},
            "difficulty": {"type": "STRING", "enum": ["Easy", "Medium", "Advanced"]},
            "count": {"type": "NUMBER"},
            "description": {"type": "STRING"},
        },
        "required": ["topic", "difficulty", "count", "description"],
    },
}

QUIZ_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "topic": {"type": "STRING"},
        "questions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "NUMBER"},
                    "question": {"type": "STRING"},
                    "options": {"type": "ARRAY", "items": {"type": "STRING"}},
                    "correctAnswer": {"type": "NUMBER", "description": "Index từ 0-3"},
                    "explanation": {"type": "STRING"},
                },
                "required": ["id", "question", "options", "correctAnswer", "explanation"],
            },
        },
    },
    "required": ["topic", "questions"],
}


class AIServiceError(Exception):
    pass


def default_suggestions(subject: str) -> List[ExerciseSuggestion]:
    return [
        ExerciseSuggestion(topic=f"{subject} - Ôn tập trọng tâm", difficulty="Easy", count=10, description="Củng cố nền tảng."),
        ExerciseSuggestion(topic=f"{subject} - Vận dụng cơ bản", difficulty="Medium", count=15, description="Luyện kỹ năng giải bài."),
        ExerciseSuggestion(topic=f"{subject} - Nâng cao bứt phá", difficulty="Advanced", count=5, description="Chinh phục điểm 10."),
    ]


class GeminiService:
    GENERATE_PATH = "/models/{model}:generateContent"

    def __init__(self, api_key: str, model: str, endpoint: str, timeout: float = 30) -> None:
        self.api_key = api_key
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "GeminiService":
        return cls(
            settings.gemini_api_key,
            settings.gemini_model,
            settings.gemini_endpoint,
            settings.ai_timeout_seconds,
        )

    def suggest(self, subject: str, score: float, class_name: str) -> List[ExerciseSuggestion]:
        prompt = (
            f"Bạn là một trợ lý giáo dục AI. Học sinh lớp {class_name} môn {subject} điểm {score}/10. "
            f"Đề xuất 3 chuyên đề bài tập phù hợp chương trình lớp {class_name}. Phản hồi JSON."
        )
        try:
            return self._suggestions(self._generate([{"text": prompt}], SUGGESTION_SCHEMA))
        except AIServiceError as exc:
            logger.error("Suggestion request for %s failed: %s", subject, exc)
            return default_suggestions(subject)

    def search(self, query: str, class_name: str) -> List[ExerciseSuggestion]:
        prompt = f'Tìm 3 chuyên đề bài tập lớp {class_name} cho yêu cầu: "{query}". Phản hồi JSON.'
        try:
            return self._suggestions(self._generate([{"text": prompt}], SUGGESTION_SCHEMA))
        except AIServiceError as exc:
            logger.error("Exercise search %r failed: %s", query, exc)
            return []

    def generate_quiz(self, topic: str, class_name: str) -> Quiz:
        prompt = (
            f'Tạo 5 câu hỏi trắc nghiệm (4 lựa chọn) về chuyên đề "{topic}" cho học sinh lớp {class_name}. '
            "Ngôn ngữ: Tiếng Việt. Phản hồi JSON."
        )
        return self._quiz(self._generate([{"text": prompt}], QUIZ_SCHEMA))

    def generate_quiz_from_file(self, data: bytes, mime_type: str, class_name: str) -> Quiz:
        if not data:
            raise AIServiceError("EMPTY_DOCUMENT")
        prompt = (
            "Bạn là một chuyên gia giáo dục. Hãy phân tích tài liệu đính kèm và tạo một bộ đề trắc nghiệm "
            f"gồm 5 câu hỏi phù hợp với trình độ học sinh lớp {class_name}.\n"
            "Yêu cầu:\n"
            "1. Ngôn ngữ: Tiếng Việt.\n"
            "2. Mỗi câu hỏi có 4 lựa chọn (A, B, C, D).\n"
            "3. Cung cấp đáp án đúng (index từ 0-3) và giải thích chi tiết lý do chọn đáp án đó.\n"
            "4. Trả về kết quả dưới dạng JSON theo đúng cấu trúc schema."
        )
        parts = [
            {"inlineData": {"data": base64.b64encode(data).decode("ascii"), "mimeType": mime_type}},
            {"text": prompt},
        ]
        return self._quiz(self._generate(parts, QUIZ_SCHEMA))

    def _generate(self, parts: List[Dict[str, Any]], schema: Dict[str, Any]) -> Any:
        if not self.api_key:
            raise AIServiceError("AI_SERVICE_UNAVAILABLE")
        url = f"{self.endpoint}{self.GENERATE_PATH.format(model=self.model)}"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        payload = {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            },
        }
        try:
            res = requests.post(url, headers=headers, json=payload, timeout=self.timeout)
        except RequestException as exc:
            raise AIServiceError("AI_SERVICE_UNAVAILABLE") from exc

        if res.status_code >= 400:
            logger.error("Generative API returned %s", res.status_code)
            raise AIServiceError("AI_SERVICE_UNAVAILABLE")

        try:
            text = self._extract_text(res.json())
            return json.loads(text)
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise AIServiceError("AI_BAD_RESPONSE") from exc

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        parts = data["candidates"][0]["content"]["parts"]
        text: Optional[str] = "".join(p.get("text", "") for p in parts)
        if not text:
            raise ValueError("empty response")
        return text

    @staticmethod
    def _suggestions(raw: Any) -> List[ExerciseSuggestion]:
        if not isinstance(raw, list):
            raise AIServiceError("AI_BAD_RESPONSE")
        try:
            return [ExerciseSuggestion.model_validate(item) for item in raw]
        except ValidationError as exc:
            raise AIServiceError("AI_BAD_RESPONSE") from exc

    @staticmethod
    def _quiz(raw: Any) -> Quiz:
        try:
            return Quiz.model_validate(raw)
        except ValidationError as exc:
            raise AIServiceError("AI_BAD_RESPONSE") from exc
