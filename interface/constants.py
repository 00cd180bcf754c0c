"""Interface-level constants for the tcr-tasks TUI/CLI."""

LANG_PACK = {
    "en": {
        "TITLE": "Tasks",
        "EMPTY_LIST": "No tasks yet. Press a to add one.",
        "STATUS_TASKS_COUNT": "{count} tasks",
        "STATUS_MODIFIED": "modified",
        "STATUS_SAVED": "saved",
        "HINT_NAVIGATE": "a add · e edit · d delete · space status · t TCR · T test cmd · E export · o output · s save · q quit",
        "HINT_OUTPUT": "↑/↓ scroll · g/G top/end · Enter/Esc back",
        "OUTPUT_TITLE": "Test output: {command} (exit {exit_status})",
        "HINT_DRAFT": "Enter confirm · Esc cancel · Ctrl+U clear",
        "PROMPT_ADD": "New task",
        "PROMPT_EDIT": "Edit task {task_id}",
        "PROMPT_TEST_COMMAND": "Test command (used by t)",
        "CONFIRM_DELETE": "Delete \"{description}\"?  Enter/y delete · Esc/n keep",
        "CONFIRM_QUIT": "Unsaved changes.  Enter/y save and quit · n quit without saving · Esc back",
        "TEST_COMMAND_LABEL": "test: {command}",
        "LAST_RUN": "last TCR: {action} (exit {exit_status}, {duration:.1f}s)",
        "ACTION_COMMITTED": "committed",
        "ACTION_REVERTED": "reverted",
        "MSG_SAVED": "Saved {path}",
        "MSG_SAVE_FAILED": "Save failed: {error}",
        "MSG_EXPORTED": "Exported {paths}",
        "MSG_EXPORT_FAILED": "Export failed: {error}",
        "MSG_DESCRIPTION_REQUIRED": "Description must not be empty",
        "MSG_TASK_GONE": "Task {task_id} no longer exists",
        "MSG_TASK_DELETED": "Deleted task {task_id}",
        "MSG_TEST_COMMAND_SET": "Test command: {command}",
        "MSG_TEST_COMMAND_REQUIRED": "Test command must not be empty",
        "MSG_TEST_COMMAND_NOT_PERSISTED": "Test command set for this session only: {error}",
        "MSG_TCR_RUNNING": "Running tests: {command}",
        "MSG_TCR_BUSY": "A TCR run is already in progress",
        "MSG_TCR_COMMITTED": "Tests passed: committed \"{message}\"",
        "MSG_TCR_REVERTED": "Tests failed (exit {exit_status}): working tree reverted",
        "MSG_TCR_REVERTED_OUTPUT": "Tests failed (exit {exit_status}): working tree reverted. Press o for the test output",
        "MSG_NO_TEST_OUTPUT": "No test output to show",
        "MSG_TCR_FLUSH_FAILED": "Save before TCR failed, tests not run: {error}",
        "MSG_TCR_SPAWN_FAILED": "Cannot start test command: {error}",
        "MSG_TCR_COMMIT_FAILED": "Tests passed but commit failed, nothing reverted: {error}",
        "MSG_TCR_REVERT_FAILED": "REVERT FAILED, working tree may be inconsistent: {error}",
        "MSG_TCR_FAILED": "TCR failed: {error}",
        "MSG_TCR_UNAVAILABLE": "TCR is not configured",
        "MSG_RELOAD_FAILED": "Reverted, but the task file cannot be reloaded: {error}",
        "MSG_QUIT_SAVE_FAILED": "Not quitting, save failed: {error}",
    },
    "ru": {
        "TITLE": "Задачи",
        "EMPTY_LIST": "Задач пока нет. Нажмите a, чтобы добавить.",
        "STATUS_TASKS_COUNT": "задач: {count}",
        "STATUS_MODIFIED": "изменено",
        "STATUS_SAVED": "сохранено",
        "HINT_NAVIGATE": "a добавить · e правка · d удалить · пробел статус · t TCR · T команда · E экспорт · o вывод · s сохранить · q выход",
        "HINT_DRAFT": "Enter подтвердить · Esc отмена · Ctrl+U очистить",
        "PROMPT_ADD": "Новая задача",
        "PROMPT_EDIT": "Правка задачи {task_id}",
        "PROMPT_TEST_COMMAND": "Команда тестов (для t)",
        "CONFIRM_DELETE": "Удалить «{description}»?  Enter/y удалить · Esc/n оставить",
        "CONFIRM_QUIT": "Есть несохранённые изменения.  Enter/y сохранить и выйти · n выйти без сохранения · Esc назад",
        "MSG_SAVED": "Сохранено: {path}",
        "MSG_SAVE_FAILED": "Не удалось сохранить: {error}",
        "MSG_DESCRIPTION_REQUIRED": "Описание не может быть пустым",
        "MSG_TCR_BUSY": "TCR уже выполняется",
        "MSG_TCR_REVERTED": "Тесты упали (код {exit_status}): изменения откатены",
        "MSG_TCR_REVERTED_OUTPUT": "Тесты упали (код {exit_status}): изменения откатены. o покажет вывод тестов",
        "MSG_TCR_REVERT_FAILED": "ОТКАТ НЕ УДАЛСЯ, рабочее дерево может быть несогласованным: {error}",
    },
}
