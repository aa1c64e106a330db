import logging
import mimetypes
from pathlib import Path
from typing import Callable, List, Optional
import flet as ft

from hurricane.core.quiz import ExerciseSuggestion, Quiz, QuizRun, export_file_name, export_quiz_text, option_letter
from hurricane.services.ai_service import AIServiceError, GeminiService
from hurricane.state.study_session import StudySession

logger = logging.getLogger(__name__)

EXPORT_DIR = Path("exports")


def build_practice_view(
    page: ft.Page,
    session: StudySession,
    on_back: Callable[[], None],
) -> ft.View:
    ai = GeminiService.from_settings()
    profile = session.state.session
    query = ft.TextField(label="Tìm chuyên đề", width=360)
    document_path = ft.TextField(label="Đường dẫn tài liệu (PDF, ảnh)", width=360)
    status = ft.Text(color=ft.Colors.RED_400)
    suggestions_column = ft.Column(spacing=8)
    quiz_column = ft.Column(spacing=8)
    run_holder: dict = {"run": None}

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def show_suggestions(items: List[ExerciseSuggestion]) -> None:
        suggestions_column.controls.clear()
        if not items:
            suggestions_column.controls.append(ft.Text("Không tìm thấy chuyên đề phù hợp."))
        for item in items:
            suggestions_column.controls.append(
                ft.Card(
                    content=ft.Container(
                        padding=12,
                        content=ft.Column(
                            controls=[
                                ft.Text(item.topic, weight=ft.FontWeight.BOLD),
                                ft.Text(f"{item.difficulty} • {item.count} bài"),
                                ft.Text(item.description, size=11),
                                ft.Button("Luyện tập", on_click=lambda _, t=item.topic: start_topic(t)),
                            ]
                        ),
                    )
                )
            )

    def smart_search(_=None) -> None:
        text = (query.value or "").strip()
        if text:
            items = ai.search(text, profile.class_name or "")
        else:
            focus = session.focus_subject(session.state.active_period)
            items = ai.suggest(focus[0], focus[1], profile.class_name or "") if focus else []
        show_suggestions(items)
        page.update()

    def start_quiz(quiz: Quiz) -> None:
        run_holder["run"] = QuizRun(quiz)
        set_status("")
        render_quiz()

    def start_topic(topic: str) -> None:
        try:
            start_quiz(ai.generate_quiz(topic, profile.class_name or ""))
        except AIServiceError:
            set_status("Không thể kết nối với Hurricane AI Practice lúc này.")
        page.update()

    def start_from_document(_) -> None:
        path = Path((document_path.value or "").strip())
        if not path.is_file():
            set_status("Không tìm thấy tài liệu.")
            page.update()
            return
        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        try:
            start_quiz(ai.generate_quiz_from_file(path.read_bytes(), mime_type, profile.class_name or ""))
        except (AIServiceError, OSError) as exc:
            logger.error("Quiz from %s failed: %s", path, exc)
            set_status("Không thể tạo đề từ tài liệu này. Vui lòng thử lại với file khác.")
        page.update()

    def export_quiz(_) -> None:
        run: Optional[QuizRun] = run_holder["run"]
        if run is None:
            return
        EXPORT_DIR.mkdir(parents=True, exist_ok=True)
        target = EXPORT_DIR / export_file_name(run.quiz)
        target.write_text(export_quiz_text(run.quiz, profile.name or "", profile.class_name or ""), encoding="utf-8")
        set_status(f"Đã lưu đề: {target}", is_error=False)
        page.update()

    def on_select(e) -> None:
        run: QuizRun = run_holder["run"]
        run.select(int(e.control.value))

    def on_answer(_) -> None:
        run: QuizRun = run_holder["run"]
        run.answer()
        render_quiz()
        page.update()

    def on_next(_) -> None:
        run: QuizRun = run_holder["run"]
        run.next_step()
        render_quiz()
        page.update()

    def render_quiz() -> None:
        quiz_column.controls.clear()
        run: Optional[QuizRun] = run_holder["run"]
        if run is None:
            return
        quiz_column.controls.append(ft.Text(run.quiz.topic, size=18, weight=ft.FontWeight.BOLD))
        if run.finished:
            quiz_column.controls.append(ft.Text(f"Kết quả: {run.score}/{run.total}", size=18))
            quiz_column.controls.append(ft.OutlinedButton("Tải đề (.txt)", on_click=export_quiz))
            return
        question = run.current
        quiz_column.controls.append(ft.Text(f"Câu {run.step + 1}/{run.total}: {question.question}"))
        quiz_column.controls.append(
            ft.RadioGroup(
                value=None if run.selected is None else str(run.selected),
                on_change=on_select,
                content=ft.Column(
                    controls=[
                        ft.Radio(value=str(idx), label=f"{option_letter(idx)}. {opt}")
                        for idx, opt in enumerate(question.options)
                    ]
                ),
            )
        )
        if run.showing_result:
            quiz_column.controls.append(
                ft.Text(f"Đáp án: {option_letter(question.correct_answer)}. {question.explanation}", italic=True)
            )
            quiz_column.controls.append(ft.Button("Câu tiếp", on_click=on_next))
        else:
            quiz_column.controls.append(ft.Button("Trả lời", on_click=on_answer))

    return ft.View(
        route="/practice",
        controls=[
            ft.AppBar(title=ft.Text("Hurricane AI - Luyện tập")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Row(controls=[ft.Button("Quay lại", on_click=lambda _: on_back())]),
                        ft.Row(controls=[query, ft.Button("Gợi ý thông minh", on_click=smart_search)]),
                        ft.Row(controls=[document_path, ft.OutlinedButton("Tạo đề từ tài liệu", on_click=start_from_document)]),
                        status,
                        suggestions_column,
                        ft.Divider(),
                        quiz_column,
                    ],
                ),
            ),
        ],
    )
