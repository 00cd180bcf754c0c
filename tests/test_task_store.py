import pytest

from core import NotFound, Status, Task, ValidationError
from application.task_store import TaskStore


def _store(*descriptions: str) -> TaskStore:
    store = TaskStore()
    for text in descriptions:
        store.add(text)
    store.mark_clean()
    return store


def test_add_assigns_increasing_ids_and_pending_status():
    store = TaskStore()
    first = store.add("Write spec")
    second = store.add("  Implement   store \n now ")

    assert (first, second) == (1, 2)
    assert store.get(2).description == "Implement store now"
    assert all(t.status is Status.PENDING for t in store.snapshot())
    assert store.dirty


def test_add_rejects_blank_description():
    store = TaskStore()
    with pytest.raises(ValidationError):
        store.add("   \n\t ")
    assert len(store) == 0
    assert not store.dirty


def test_ids_are_not_reused_after_delete():
    store = _store("a", "b", "c")
    store.remove(3)
    assert store.add("d") == 4
    assert [t.id for t in store.snapshot()] == [1, 2, 4]


def test_cycle_status_three_times_is_identity():
    store = _store("a")
    original = store.snapshot()
    assert store.cycle_status(1) is Status.WORKING
    assert store.cycle_status(1) is Status.DONE
    assert store.cycle_status(1) is Status.PENDING
    assert store.snapshot() == original


def test_update_description_validates_and_keeps_id():
    store = _store("old")
    store.update_description(1, "new text")
    assert store.get(1) == Task(1, "new text", Status.PENDING)
    with pytest.raises(ValidationError):
        store.update_description(1, "   ")
    assert store.get(1).description == "new text"


def test_missing_ids_raise_not_found():
    store = _store("a")
    with pytest.raises(NotFound) as exc:
        store.remove(99)
    assert exc.value.task_id == 99
    with pytest.raises(NotFound):
        store.cycle_status(99)
    with pytest.raises(NotFound):
        store.update_description(99, "x")
    assert not store.dirty


def test_snapshot_is_immutable_copy():
    store = _store("a", "b")
    snap = store.snapshot()
    store.remove(1)
    assert [t.id for t in snap] == [1, 2]
    assert isinstance(snap, tuple)


def test_replace_all_moves_counter_forward_only():
    store = _store("a", "b", "c")
    store.replace_all([Task(1, "a")], next_id=2)
    assert store.next_id == 4
    assert not store.dirty
    with pytest.raises(ValueError):
        store.replace_all([Task(5, "x"), Task(5, "y")])


def test_equality_compares_content():
    assert _store("a", "b") == _store("a", "b")
    assert _store("a") != _store("b")


def test_load_reads_task_file(tmp_path):
    path = tmp_path / "tasks.md"
    assert len(TaskStore.load(path)) == 0
    path.write_text("- [~] resume work\n", encoding="utf-8")
    assert TaskStore.load(path).snapshot() == (Task(1, "resume work", Status.WORKING),)
