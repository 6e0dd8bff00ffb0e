"""
Polling RightScale tasks until they complete, fail or run out of time.

Each round queries every task that is still pending, in the order given.
A task whose summary mentions ``failed`` aborts the whole batch at once.
When all tasks have completed the wait is over; otherwise the round counter
goes up by one and, once it reaches ``timeout``, the wait fails. Rounds are
separated by a fixed ``poll_interval`` sleep, so the wait lasts at most
``timeout * poll_interval`` seconds plus request time.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional

from elbman.domain.types.task import TaskInfo, TaskState
from elbman.errors import PollTimeout, TaskFailed

if TYPE_CHECKING:
    from elbman.api.api import Api

DEFAULT_TIMEOUT = 300
DEFAULT_POLL_INTERVAL = 1.0


@dataclass
class PollState:
    timeout: int
    iterations: int = 0

    @property
    def exhausted(self) -> bool:
        return self.iterations >= self.timeout


class TaskPoller:

    def __init__(
        self,
        api: "Api",
        timeout: int = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if timeout < 1:
            raise ValueError("timeout must be at least one polling round")
        self._api = api
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger(__name__)
        self._sleep = sleep
        self.state = PollState(timeout=timeout)

    def check(self, task: TaskInfo) -> bool:
        """
        Query the task once.

        :return: True if it completed, False if it is still running.
        :raises TaskFailed: if the task reports a failure.
        """
        current = self._api.task.show(task)
        self.logger.debug('Checking task "%s"', current)
        state = current.state
        if state is TaskState.COMPLETED:
            return True
        if state is TaskState.FAILED:
            raise TaskFailed(current.href, current.summary)
        return False

    def await_completion(self, tasks: Iterable[TaskInfo]) -> None:
        """
        Block until every task has completed.

        :raises TaskFailed: as soon as one task fails.
        :raises PollTimeout: after ``timeout`` rounds with tasks still pending.
        """
        pending: List[TaskInfo] = list(tasks)
        self.state = PollState(timeout=self.timeout)

        while pending:
            pending = [task for task in pending if not self.check(task)]
            if not pending:
                break

            self.logger.info(
                "Waiting for ELB tasks to complete... (%s pending)", len(pending)
            )
            self.state.iterations += 1
            if self.state.exhausted:
                raise PollTimeout(self.state.iterations, self.poll_interval)
            self._sleep(self.poll_interval)

    def await_task(self, task: TaskInfo) -> TaskInfo:
        """Wait for a single task and return its final state."""
        self.await_completion([task])
        final = self._api.task.show(task)
        self.logger.info("Task completed (%s).", final.summary)
        return final
