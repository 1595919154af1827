import asyncio
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class AsyncRecurringJob(ABC):
    """
    Base class for recurring asynchronous background jobs.

    Subclasses implement `run_once()`; this class owns the background task,
    the sleep between runs, exception logging and cooperative cancellation.
    A run that outlasts the interval delays the next one; runs never queue up.
    """

    def __init__(self, interval_seconds: float, initial_delay_seconds: float = 0.0):
        """
        Args:
            interval_seconds: Time between the end of one run and the start of the next.
            initial_delay_seconds: Wait before the first run.
        """
        self._interval = float(interval_seconds)
        self._initial_delay = float(initial_delay_seconds)
        self._task: asyncio.Task | None = None
        self._stopping: bool = False

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def initial_delay_seconds(self) -> float:
        return self._initial_delay

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @abstractmethod
    async def run_once(self) -> None:
        """The operation executed once per interval."""
        ...

    # ----------------------------------------------------------------------
    # Internal background loop
    # ----------------------------------------------------------------------
    async def _loop(self) -> None:
        name = self.__class__.__name__
        logger.info(f"[{name}] loop started (interval={self._interval}s, initial_delay={self._initial_delay}s)")

        try:
            if self._initial_delay > 0:
                await asyncio.sleep(self._initial_delay)

            while not self._stopping:
                try:
                    await self.run_once()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.exception(f"[{name}] exception in run_once: {e}")

                if self._interval > 0 and not self._stopping:
                    await asyncio.sleep(self._interval)
        except asyncio.CancelledError:
            logger.info(f"[{name}] task cancelled")

        logger.info(f"[{name}] loop stopped")

    # ----------------------------------------------------------------------
    # Public API: start & stop
    # ----------------------------------------------------------------------
    def start(self) -> asyncio.Task:
        """Start the job in the background and return its task handle."""
        if self.is_running:
            logger.warning(f"[{self.__class__.__name__}] already running")
            return self._task

        self._stopping = False
        self._task = asyncio.create_task(self._loop())
        return self._task

    async def stop(self) -> None:
        """Stop the job and wait for the task to finish. Safe to call when not running."""
        self._stopping = True

        if not self._task:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None
