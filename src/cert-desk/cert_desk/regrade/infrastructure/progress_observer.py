"""ProgressRegradeObserver — renders a Rich regrade progress bar to stderr."""

from __future__ import annotations

from rich.console import Console
from rich.progress import Progress, ProgressColumn, Task, TaskID, TextColumn
from rich.text import Text


class _ThreeSegmentBarColumn(ProgressColumn):
    """ProgressColumn that renders three segments: regraded, current, pending."""

    def __init__(self, bar_width: int = 40) -> None:
        super().__init__()
        self.bar_width = bar_width

    def render(self, task: Task) -> Text:
        bar_width = self.bar_width or 40
        total = task.total or 0
        if total > 0:
            done_cells = int(task.completed / total * bar_width)
            current = 1 if task.fields.get("current") else 0
            # The current step fills from where done ends; never past the bar.
            current_cells = min(
                max(int(current / total * bar_width), current),
                bar_width - done_cells,
            )
        else:
            done_cells = 0
            current_cells = 0
        pending_cells = bar_width - done_cells - current_cells

        result = Text()
        result.append("█" * done_cells, style="bright_green")
        result.append("▒" * current_cells, style="yellow")
        result.append("░" * pending_cells, style="dim white")
        return result


class ProgressRegradeObserver:
    """Renders one progress row for the regrade of a run.

    Pass ``disabled=True`` to suppress all terminal output (useful in tests);
    counters are still maintained.

    Does NOT inherit from RegradeObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._done = 0
        self._total = 0
        self._current: str | None = None
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None

    @property
    def done(self) -> int:
        return self._done

    @property
    def current(self) -> str | None:
        return self._current

    def _open(self, run_id: str, total_steps: int) -> None:
        self._total = total_steps
        if self._disabled:
            return
        self._progress = Progress(
            TextColumn("{task.description}"),
            _ThreeSegmentBarColumn(bar_width=40),
            TextColumn("{task.fields[done]}/{task.total:.0f}"),
            TextColumn("{task.fields[status]}"),
            console=Console(stderr=True),
            transient=False,
        )
        self._task_id = self._progress.add_task(
            description=f"Regrade {run_id}",
            total=float(total_steps),
            completed=self._done,
            done=self._done,
            current=None,
            status="",
        )
        self._progress.start()

    def _close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task_id = None

    def _update(self, status: str) -> None:
        if self._progress is None or self._task_id is None:
            return
        self._progress.update(
            self._task_id,
            completed=self._done,
            done=self._done,
            current=self._current,
            status=status,
        )

    def regrade_started(self, run_id: str, total_steps: int) -> None:
        self._done = 0
        self._current = None
        self._open(run_id=run_id, total_steps=total_steps)

    def regrade_resumed(self, run_id: str, position: int, total_steps: int) -> None:
        self._done = position
        self._current = None
        self._open(run_id=run_id, total_steps=total_steps)

    def regrade_step_started(
        self, run_id: str, step_id: str, position: int, total_steps: int
    ) -> None:
        self._current = step_id
        self._update(status=f"step {step_id}")

    def regrade_step_completed(
        self, run_id: str, step_id: str, position: int, score: int, progress: int
    ) -> None:
        self._done = position + 1
        self._current = None
        self._update(status=f"{progress}%")

    def regrade_failed(
        self, run_id: str, step_id: str, position: int, reason: str
    ) -> None:
        self._current = None
        self._update(status=f"failed at step {step_id}")
        self._close()

    def regrade_completed(self, run_id: str, total_steps: int) -> None:
        self._current = None
        self._update(status="done")
        self._close()

    def regrade_cancelled(self, run_id: str, position: int) -> None:
        self._current = None
        self._close()

    def regrade_discarded(self, run_id: str) -> None:
        self._done = 0
        self._current = None
