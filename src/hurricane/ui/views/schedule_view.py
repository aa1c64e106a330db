from datetime import date
from typing import Callable
import flet as ft

from hurricane.core.schedule import SESSION_LABELS, SESSIONS, date_key, shift_week, week_dates
from hurricane.state.study_session import StudySession

DAY_NAMES = ["Thứ 2", "Thứ 3", "Thứ 4", "Thứ 5", "Thứ 6", "Thứ 7", "Chủ nhật"]


def build_schedule_view(
    page: ft.Page,
    session: StudySession,
    on_back: Callable[[], None],
) -> ft.View:
    anchor = {"day": date.today()}
    week_label = ft.Text(size=16, weight=ft.FontWeight.BOLD)
    days_column = ft.Column(spacing=10)

    def on_session_change(key: str, slot: str):
        def handler(e):
            session.set_schedule(key, slot, e.control.value or "")

        return handler

    def render() -> None:
        dates = week_dates(anchor["day"])
        week_label.value = f"Tuần này: {dates[0]:%d/%m/%Y} - {dates[-1]:%d/%m/%Y}"
        today_key = date_key(date.today())
        days_column.controls.clear()
        for idx, (day, entry) in enumerate(session.state.schedule.week(anchor["day"])):
            key = date_key(day)
            fields = [
                ft.TextField(
                    label=SESSION_LABELS[slot],
                    value=getattr(entry, slot),
                    multiline=True,
                    width=220,
                    on_blur=on_session_change(key, slot),
                )
                for slot in SESSIONS
            ]
            days_column.controls.append(
                ft.Card(
                    content=ft.Container(
                        padding=12,
                        bgcolor=ft.Colors.BLUE_50 if key == today_key else None,
                        content=ft.Column(
                            controls=[
                                ft.Text(f"{DAY_NAMES[idx]} {day:%d/%m}", weight=ft.FontWeight.BOLD),
                                ft.Row(controls=fields, wrap=True),
                            ]
                        ),
                    )
                )
            )

    def refresh() -> None:
        render()
        page.update()

    def move(offset: int) -> None:
        anchor["day"] = shift_week(anchor["day"], offset)
        refresh()

    def go_today(_) -> None:
        anchor["day"] = date.today()
        refresh()

    render()

    return ft.View(
        route="/schedule",
        controls=[
            ft.AppBar(title=ft.Text("Hurricane AI - Lịch học")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Row(
                            controls=[
                                ft.Button("Quay lại", on_click=lambda _: on_back()),
                                ft.IconButton(icon=ft.Icons.CHEVRON_LEFT, on_click=lambda _: move(-1)),
                                ft.OutlinedButton("Hôm nay", on_click=go_today),
                                ft.IconButton(icon=ft.Icons.CHEVRON_RIGHT, on_click=lambda _: move(1)),
                            ]
                        ),
                        week_label,
                        days_column,
                    ],
                ),
            ),
        ],
    )
