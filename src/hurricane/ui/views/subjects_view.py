from typing import Callable, Dict
import flet as ft

from hurricane.core.catalog import DEFAULT_SELECTION, GRADED_SUBJECTS, PASS_FAIL_SUBJECTS
from hurricane.state.study_session import SessionError, StudySession


def build_subjects_view(
    page: ft.Page,
    session: StudySession,
    on_complete: Callable[[], None],
) -> ft.View:
    checkboxes: Dict[str, ft.Checkbox] = {}
    count_text = ft.Text()
    status = ft.Text(color=ft.Colors.RED_400)

    def refresh_count(_=None) -> None:
        selected = sum(1 for box in checkboxes.values() if box.value)
        count_text.value = f"Xác nhận danh sách ({selected} môn)"
        page.update()

    def group(names) -> ft.Row:
        boxes = []
        for name in names:
            box = ft.Checkbox(label=name, value=name in DEFAULT_SELECTION, on_change=refresh_count)
            checkboxes[name] = box
            boxes.append(box)
        return ft.Row(controls=boxes, wrap=True)

    def on_confirm(_):
        names = [name for name, box in checkboxes.items() if box.value]
        try:
            session.select_subjects(names)
        except SessionError as exc:
            status.value = str(exc)
            page.update()
            return
        on_complete()

    graded_row = group(GRADED_SUBJECTS)
    pass_fail_row = group(PASS_FAIL_SUBJECTS)
    count_text.value = f"Xác nhận danh sách ({len(DEFAULT_SELECTION)} môn)"

    return ft.View(
        route="/subjects",
        controls=[
            ft.AppBar(title=ft.Text("Hurricane AI - Chọn môn học")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Text("Môn tính điểm", size=20, weight=ft.FontWeight.BOLD),
                        graded_row,
                        ft.Divider(),
                        ft.Text("Môn đánh giá Đạt / Chưa đạt", size=20, weight=ft.FontWeight.BOLD),
                        pass_fail_row,
                        ft.Divider(),
                        count_text,
                        ft.Button("Xác nhận", on_click=on_confirm),
                        status,
                    ],
                ),
            ),
        ],
    )
