"""
Triggering the ELB attach/detach RightScript on a server array.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional

from elbman.domain.types.task import TaskInfo
from elbman.ops.locator import locate
from elbman.ops.scripts import Action, Environment, ScriptTable

if TYPE_CHECKING:
    from elbman.api.api import Api

ELB_NAME_INPUT = "ELB_NAME"


def build_inputs(elb_name: str) -> Dict[str, str]:
    """RightScript inputs are typed strings: ``text:<value>``."""
    return {ELB_NAME_INPUT: "text:%s" % elb_name}


class Dispatcher:
    """
    Resolves the RightScript for an action/environment pair and runs it on
    every instance of a server array.
    """

    def __init__(
        self,
        api: "Api",
        scripts: Optional[ScriptTable] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._api = api
        self._scripts = scripts if scripts is not None else ScriptTable.default()
        self.logger = logger or logging.getLogger(__name__)

    def dispatch(
        self,
        action,
        environment,
        server_array_name: str,
        elb_name: str,
        dry_run: bool = False,
    ) -> Optional[TaskInfo]:
        """
        Add or remove all instances of a server array to or from an ELB.

        :param action: ``add`` (or ``attach``) or ``remove``.
        :param environment: ``staging`` or ``prod``.
        :param server_array_name: Exact name of the server array.
        :param elb_name: Name of the ELB.
        :param dry_run: Validate and resolve the RightScript only. No API call is made.
        :return: Task tracking the script run, or None in dry run mode.
        :raises ConfigurationError: on an unknown action or environment.
        :raises ResourceNotFound: if the server array does not exist.
        """
        action = Action.parse(action)
        environment = Environment.parse(environment)

        self.logger.debug("Grabbing %s and %s", action.value, environment.value)
        right_script = self._scripts.resolve(action, environment)
        self.logger.debug("right_script is %s", right_script)

        if dry_run:
            self.logger.info("Dry run mode. Not operating on the ELB.")
            self.logger.info(
                "Would run %s: " + action.verb, right_script, server_array_name, elb_name
            )
            return None

        self.logger.info("Looking for server_array %s.", server_array_name)
        server_array = locate(self._api, server_array_name, logger=self.logger)

        self.logger.info(action.verb, server_array_name, elb_name)
        task = self._api.server_array.multi_run_executable(
            server_array,
            right_script_href=right_script,
            inputs=build_inputs(elb_name),
        )
        self.logger.debug("Started task %s", task.href)
        return task
