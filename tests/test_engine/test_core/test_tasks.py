import pytest
from engine.core.tasks import TaskRegistry

def test_task_fires_after_delay(tasks):
    fired = []
    tasks.schedule(1.0, lambda: fired.append("a"), name="a")

    tasks.update(0.5)
    assert fired == []

    tasks.update(0.5)
    assert fired == ["a"]
    assert tasks.pending == 0

def test_tasks_fire_in_due_order(tasks):
    fired = []
    tasks.schedule(2.0, lambda: fired.append("late"))
    tasks.schedule(1.0, lambda: fired.append("early"))
    tasks.schedule(1.0, lambda: fired.append("early-2"))

    assert tasks.update(3.0) == 3
    assert fired == ["early", "early-2", "late"]

def test_cancelled_task_never_runs(tasks):
    fired = []
    handle = tasks.schedule(1.0, lambda: fired.append("x"))

    assert tasks.cancel(handle) is True
    tasks.advance(2.0)

    assert fired == []

def test_cancel_fired_or_unknown_handle_is_noop(tasks):
    handle = tasks.schedule(0.1, lambda: None)
    tasks.advance(0.2)

    assert tasks.cancel(handle) is False
    assert tasks.cancel(None) is False
    assert tasks.cancel(handle) is False

def test_handle_removed_before_callback(tasks):
    seen = []
    holder = {}

    def callback():
        seen.append(tasks.is_pending(holder["handle"]))

    holder["handle"] = tasks.schedule(0.1, callback)
    tasks.advance(0.2)

    assert seen == [False]

def test_callback_can_cancel_everything(tasks):
    fired = []
    tasks.schedule(1.0, lambda: tasks.cancel_all())
    tasks.schedule(1.0, lambda: fired.append("second"))

    tasks.update(1.0)

    assert fired == []
    assert len(tasks) == 0

def test_callback_error_is_logged_not_raised(tasks, caplog):
    fired = []

    def broken():
        raise ValueError("bad task")

    tasks.schedule(0.1, broken, name="broken")
    tasks.schedule(0.2, lambda: fired.append("ok"))

    tasks.advance(0.5)

    assert fired == ["ok"]
    assert "broken" in caplog.text

def test_zero_delay_reschedule_runs_same_update(tasks):
    fired = []
    tasks.schedule(0.5, lambda: tasks.schedule(0, lambda: fired.append("chained")))

    tasks.update(0.5)

    assert fired == ["chained"]

def test_cancel_all_returns_count(tasks):
    tasks.schedule(1.0, lambda: None)
    tasks.schedule(2.0, lambda: None)

    assert tasks.cancel_all() == 2
    assert tasks.cancel_all() == 0

def test_context_manager_cancels_on_exit():
    fired = []
    with TaskRegistry() as registry:
        registry.schedule(1.0, lambda: fired.append("x"))

    registry.advance(2.0)
    assert fired == []
    assert registry.pending == 0

def test_advance_moves_clock(tasks):
    tasks.advance(1.0, step=0.25)
    assert tasks.time == pytest.approx(1.0)
