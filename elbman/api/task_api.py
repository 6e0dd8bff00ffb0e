from typing import Union, cast

from elbman.api.module_api import ModuleApi
from elbman.domain.types.task import TaskInfo


class TaskApi(ModuleApi):

    @staticmethod
    def _info_class() -> type[TaskInfo]:
        return TaskInfo

    def _endpoint_prefix(self) -> str:
        return "tasks"

    def show(self, task: Union[TaskInfo, str]) -> TaskInfo:
        """Fetch the current state of a task. Never served from a cache."""
        href = task.href if isinstance(task, TaskInfo) else task
        if not href:
            raise ValueError("Task has no href")
        resp = self._api.get(href)
        return cast(TaskInfo, self._info_class().from_json({**resp.json(), "href": href}))
