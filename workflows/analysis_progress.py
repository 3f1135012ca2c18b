"""
Analysis progress indicator shown while the orchestrator call is outstanding
"""
import asyncio
from typing import Optional, Sequence, Tuple

from utils.logging_config import get_logger

logger = get_logger('workflows.analysis_progress')

INITIAL_STEP = 'Retrieving transaction records...'
COMPLETE_STEP = 'Analysis complete!'
FAILED_STEP = 'Analysis failed. Please try again.'

# (seconds after start, percent, step label or None to keep the current label)
PROGRESS_SCHEDULE: Sequence[Tuple[float, int, Optional[str]]] = (
    (0.5, 25, None),
    (1.5, 50, 'Checking policy compliance...'),
    (3.0, 75, 'Analyzing decision factors...'),
)


def progress_at(elapsed: float, schedule=PROGRESS_SCHEDULE) -> Tuple[int, str]:
    """Percent and label the indicator shows ``elapsed`` seconds into a run"""
    percent, step = 0, INITIAL_STEP
    for at, milestone_percent, milestone_step in schedule:
        if elapsed < at:
            break
        percent = milestone_percent
        if milestone_step:
            step = milestone_step
    return percent, step


class AnalysisProgress:
    """
    Drives the decorative progress fields of a CaseState

    The schedule only ever writes ``progress_percent`` and ``progress_step``
    and never lowers the percentage. complete() and fail() cancel the timer
    before writing, so a late tick cannot follow them.
    """

    def __init__(self, state, schedule=PROGRESS_SCHEDULE):
        self.state = state
        self.schedule = schedule
        self._task: Optional[asyncio.Task] = None
        self._started_at = 0.0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        self.cancel()
        self.state.progress_percent = 0
        self.state.progress_step = INITIAL_STEP
        loop = asyncio.get_running_loop()
        self._started_at = loop.time()
        self._task = loop.create_task(self._tick())

    async def _tick(self) -> None:
        loop = asyncio.get_running_loop()
        for at, _, _ in self.schedule:
            delay = self._started_at + at - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            elapsed = max(loop.time() - self._started_at, at)
            self._write(*progress_at(elapsed, self.schedule))

    def _write(self, percent: int, step: str) -> None:
        if percent < self.state.progress_percent:
            return
        self.state.progress_percent = percent
        self.state.progress_step = step

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def complete(self) -> None:
        self.cancel()
        self._write(100, COMPLETE_STEP)

    def fail(self) -> None:
        self.cancel()
        self.state.progress_step = FAILED_STEP
        logger.info(f"[ANALYSIS] Progress stopped at {self.state.progress_percent}%")
