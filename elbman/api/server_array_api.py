from typing import Dict, List, Optional, Union, cast

from elbman.api.module_api import ModuleApi
from elbman.domain.types.server_array import ServerArrayInfo
from elbman.domain.types.task import TaskInfo


class ServerArrayApi(ModuleApi):

    @staticmethod
    def _info_class() -> type[ServerArrayInfo]:
        return ServerArrayInfo

    def _endpoint_prefix(self) -> str:
        return "server_arrays"

    # --- Retrieval ------------------------------------------------
    def get_list(self, filter: Optional[List[str]] = None) -> List[ServerArrayInfo]:
        """
        List server arrays, optionally narrowed with RightScale filter
        expressions such as ``"name==my_array"``.

        The API treats ``name==`` as a partial match, so the result may hold
        arrays whose names only contain the requested one.
        """
        params = [("filter[]", expr) for expr in filter or []]
        items = self._get_list(params=params)
        return [cast(ServerArrayInfo, item) for item in items]

    # --- Execution ------------------------------------------------
    def multi_run_executable(
        self,
        server_array: Union[ServerArrayInfo, str],
        right_script_href: str,
        inputs: Optional[Dict[str, str]] = None,
    ) -> TaskInfo:
        """
        Run a RightScript on every instance of the server array.

        :param server_array: Server array or its href.
        :param right_script_href: Href of the RightScript to run.
        :param inputs: Script inputs in RightScale typed notation, e.g.
            ``{"ELB_NAME": "text:my_elb"}``.
        :return: Handle of the task that tracks the run on all instances.
        """
        href = server_array.href if isinstance(server_array, ServerArrayInfo) else server_array
        if not href:
            raise ValueError("Server array has no href")

        data = [("right_script_href", right_script_href)]
        for key, value in (inputs or {}).items():
            data.append((f"inputs[{key}]", value))

        resp = self._api.post(f"{href.rstrip('/')}/multi_run_executable", data=data)
        task_href = resp.headers.get("Location")
        if not task_href:
            raise RuntimeError("multi_run_executable response carries no task location")
        return TaskInfo(href=task_href)
