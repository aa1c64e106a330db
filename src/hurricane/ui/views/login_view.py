from typing import Callable
import flet as ft

from hurricane.state.study_session import SessionError, StudySession


def build_login_view(
    page: ft.Page,
    session: StudySession,
    on_authenticated: Callable[[], None],
) -> ft.View:
    name = ft.TextField(label="Họ và tên", hint_text="Nhập họ và tên...", width=350)
    class_name = ft.TextField(label="Lớp", hint_text="VD: 10A1...", width=350)
    status_text = ft.Text(color=ft.Colors.RED_400)

    def on_sign_in(_):
        try:
            session.login(name.value or "", class_name.value or "")
        except SessionError as exc:
            status_text.value = str(exc)
            page.update()
            return
        on_authenticated()

    return ft.View(
        route="/login",
        controls=[
            ft.AppBar(title=ft.Text("Hurricane AI")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    controls=[
                        ft.Text("Hurricane AI", size=30, weight=ft.FontWeight.BOLD),
                        ft.Text("Sổ điểm và kế hoạch học tập của bạn."),
                        name,
                        class_name,
                        ft.Button("Bắt đầu", on_click=on_sign_in),
                        status_text,
                    ],
                ),
            ),
        ],
    )
