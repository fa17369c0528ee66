"""Tests for ProgressRegradeObserver."""

from rich.progress import Progress

from cert_desk.regrade.infrastructure.progress_observer import (
    ProgressRegradeObserver,
    _ThreeSegmentBarColumn,
)


def _make_observer() -> ProgressRegradeObserver:
    return ProgressRegradeObserver(disabled=True)


class TestCounters:
    """Counters track reprocessed steps even when rendering is disabled."""

    def test_started_resets_counters(self) -> None:
        observer = _make_observer()

        observer.regrade_started(run_id="RUN-1", total_steps=3)

        assert observer.done == 0
        assert observer.current is None

    def test_step_started_sets_current(self) -> None:
        observer = _make_observer()
        observer.regrade_started(run_id="RUN-1", total_steps=3)

        observer.regrade_step_started(run_id="RUN-1", step_id="g-0", position=0, total_steps=3)

        assert observer.current == "g-0"

    def test_step_completed_advances_done(self) -> None:
        observer = _make_observer()
        observer.regrade_started(run_id="RUN-1", total_steps=3)
        observer.regrade_step_started(run_id="RUN-1", step_id="g-0", position=0, total_steps=3)

        observer.regrade_step_completed(
            run_id="RUN-1", step_id="g-0", position=0, score=50, progress=33
        )

        assert observer.done == 1
        assert observer.current is None

    def test_resume_starts_from_failed_position(self) -> None:
        observer = _make_observer()
        observer.regrade_started(run_id="RUN-1", total_steps=3)
        observer.regrade_failed(run_id="RUN-1", step_id="g-1", position=1, reason="x")

        observer.regrade_resumed(run_id="RUN-1", position=1, total_steps=3)

        assert observer.done == 1

    def test_discard_resets_done(self) -> None:
        observer = _make_observer()
        observer.regrade_started(run_id="RUN-1", total_steps=3)
        observer.regrade_step_completed(
            run_id="RUN-1", step_id="g-0", position=0, score=50, progress=33
        )

        observer.regrade_discarded(run_id="RUN-1")

        assert observer.done == 0


class TestThreeSegmentBar:
    def _render(self, completed: int, total: int, current: str | None) -> str:
        progress = Progress(_ThreeSegmentBarColumn(bar_width=10), disable=True)
        task_id = progress.add_task("x", total=total, completed=completed, current=current)
        column = _ThreeSegmentBarColumn(bar_width=10)
        return column.render(progress.tasks[task_id]).plain

    def test_bar_always_fills_width(self) -> None:
        assert len(self._render(completed=1, total=3, current="g-1")) == 10

    def test_segments_reflect_done_current_pending(self) -> None:
        bar = self._render(completed=1, total=2, current="g-1")

        assert bar == "█" * 5 + "▒" * 5

    def test_nothing_done_is_all_pending(self) -> None:
        assert self._render(completed=0, total=4, current=None) == "░" * 10

    def test_all_done_is_full(self) -> None:
        assert self._render(completed=4, total=4, current=None) == "█" * 10
