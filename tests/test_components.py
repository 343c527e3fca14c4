from datetime import datetime

from todo_mvp.client.components import (
    StatusFilter,
    TaskFormValues,
    format_optional_date,
    render_confirm_dialog,
    render_task_card,
    render_task_filter,
    render_task_form,
)
from todo_mvp.schemas import TaskDto

from .client_helpers import task_json


def make_task(**overrides):
    return TaskDto.model_validate(task_json(1, "Task 1", **overrides))


class TestTaskCard:
    def test_open_task_without_optional_fields(self):
        card = render_task_card(make_task())
        assert card.splitlines() == ["#1 Task 1 [Open]", "    [Edit] [Delete]"]

    def test_completed_task_with_details(self):
        card = render_task_card(
            make_task(isCompleted=True, description="Milk", dueDate="2099-12-25T00:00:00"),
            is_deleting=True,
        )
        assert "[Completed]" in card
        assert "    Milk" in card
        assert "    Due: 2099-12-25 00:00" in card
        assert "[Deleting...]" in card


class TestTaskForm:
    def test_from_task_prefills_values(self):
        values = TaskFormValues.from_task(make_task(description=None, isCompleted=True))
        assert values.title == "Task 1"
        assert values.description == ""
        assert values.is_completed is True

    def test_requests_are_trimmed(self):
        values = TaskFormValues(title="  Title  ", description="  note  ", due_date=datetime(2030, 1, 1))
        create = values.to_create_request()
        assert create.title == "Title"
        assert create.description == "note"
        update = TaskFormValues(title="T", description="   ", is_completed=True).to_update_request()
        assert update.description is None
        assert update.is_completed is True

    def test_validate_title_length(self):
        assert TaskFormValues(title="a" * 200).validate() == []
        assert TaskFormValues(title="a" * 201).validate() == ["Title must be at most 200 characters."]

    def test_render_modes(self):
        create_view = render_task_form(False, TaskFormValues(title="x"))
        assert create_view.startswith("Create Task")
        assert "Completed:" not in create_view
        assert create_view.endswith("[Cancel] [Create]")

        edit_view = render_task_form(True, TaskFormValues(title="x", is_completed=True), is_saving=True, error_message="nope")
        assert edit_view.startswith("Edit Task")
        assert "Error: nope" in edit_view
        assert "Completed: [x]" in edit_view
        assert edit_view.endswith("[Cancel] [Saving...]")


class TestMisc:
    def test_filter_marks_selection(self):
        assert render_task_filter(StatusFilter.OPEN) == "Filter: All (Open) Completed"
        assert render_task_filter(StatusFilter.ALL, disabled=True) == "Filter: (All) Open Completed (disabled)"

    def test_confirm_dialog(self):
        text = render_confirm_dialog(make_task(), is_deleting=True)
        assert 'Delete "Task 1"?' in text
        assert text.endswith("[Cancel] [Deleting...]")

    def test_format_optional_date(self):
        assert format_optional_date(None) is None
        assert format_optional_date(datetime(2030, 2, 3, 4, 5)) == "2030-02-03 04:05"
