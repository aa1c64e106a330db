from typing import Callable, Optional
import flet as ft

from hurricane.core.prediction import MAX_STRONG_SUBJECTS, Goal, PredictionStatus, SemesterNeeds
from hurricane.state.study_session import SessionError, StudySession


def _needs_text(label: str, needs: Optional[SemesterNeeds]) -> ft.Text:
    if needs is None:
        return ft.Text(f"{label}: --")
    if needs.is_empty:
        return ft.Text(f"{label}: không còn điểm cần dự đoán")
    parts = []
    if needs.tx is not None:
        parts.append(f"TX ≥ {needs.tx}")
    if needs.gk is not None:
        parts.append(f"GK ≥ {needs.gk}")
    if needs.ck is not None:
        parts.append(f"CK ≥ {needs.ck}")
    return ft.Text(f"{label}: " + ", ".join(parts))


def build_prediction_view(
    page: ft.Page,
    session: StudySession,
    on_back: Callable[[], None],
) -> ft.View:
    target = session.prediction_target
    goal_dd = ft.Dropdown(
        label="Mục tiêu",
        width=240,
        value=target.goal.value,
        options=[
            ft.dropdown.Option(Goal.EXCELLENT.value, "Học sinh Giỏi (Tốt)"),
            ft.dropdown.Option(Goal.GOOD.value, "Học sinh Khá"),
        ],
    )
    strong_row = ft.Row(wrap=True)
    cards = ft.Column(spacing=8)
    status = ft.Text(color=ft.Colors.RED_400)

    def on_toggle_strong(name: str):
        def handler(_):
            try:
                if not session.toggle_strong_subject(name):
                    status.value = f"Chỉ chọn tối đa {MAX_STRONG_SUBJECTS} môn thế mạnh."
                else:
                    status.value = ""
            except SessionError as exc:
                status.value = str(exc)
            refresh()

        return handler

    def refresh_strong() -> None:
        strong_row.controls.clear()
        for subject in session.state.subjects.graded():
            strong_row.controls.append(
                ft.Checkbox(
                    label=subject.name,
                    value=target.is_strong(subject.name),
                    on_change=on_toggle_strong(subject.name),
                )
            )

    def refresh_cards() -> None:
        cards.controls.clear()
        for prediction in session.predictions():
            achieved = prediction.status is PredictionStatus.ACHIEVED
            controls = [
                ft.Row(
                    alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                    controls=[
                        ft.Text(prediction.subject_name, weight=ft.FontWeight.BOLD),
                        ft.Text(f"Mục tiêu {prediction.target:.1f}"),
                    ],
                )
            ]
            if not achieved:
                controls.append(_needs_text("HK I", prediction.hk1))
                controls.append(_needs_text("HK II", prediction.hk2))
            controls.append(
                ft.Text(
                    prediction.comment,
                    italic=True,
                    size=11,
                    color=ft.Colors.GREEN_600 if achieved else None,
                )
            )
            cards.controls.append(ft.Card(content=ft.Container(padding=12, content=ft.Column(controls=controls))))

    def refresh() -> None:
        refresh_strong()
        refresh_cards()
        page.update()

    def on_goal_change(_):
        session.set_goal(goal_dd.value)
        refresh()

    goal_dd.on_change = on_goal_change
    refresh_strong()
    refresh_cards()

    return ft.View(
        route="/prediction",
        controls=[
            ft.AppBar(title=ft.Text("Hurricane AI - Dự đoán")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Row(controls=[ft.Button("Quay lại", on_click=lambda _: on_back())]),
                        goal_dd,
                        ft.Text(f"Môn thế mạnh (tối đa {MAX_STRONG_SUBJECTS})", size=18, weight=ft.FontWeight.BOLD),
                        strong_row,
                        status,
                        ft.Divider(),
                        cards,
                    ],
                ),
            ),
        ],
    )
