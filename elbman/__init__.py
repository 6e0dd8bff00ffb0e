"""
Public package interface for elbman.

Adds or removes every instance of a RightScale server array to or from an
ELB by running a RightScript on the array and waiting for the task.
"""

from __future__ import annotations

from elbman.api.api import Api
from elbman.domain.types import ServerArrayInfo, TaskInfo, TaskState
from elbman.errors import (
    AmbiguousResource,
    AuthenticationError,
    ConfigurationError,
    ElbManagerError,
    PollTimeout,
    ResourceNotFound,
    TaskFailed,
)
from elbman.io.credentials import ElbManagerSettings
from elbman.ops.dispatcher import Dispatcher, build_inputs
from elbman.ops.locator import find_all, locate
from elbman.ops.orchestrator import RunConfig, run
from elbman.ops.poller import TaskPoller
from elbman.ops.scripts import Action, Environment, OperationSpec, ScriptTable

__version__ = "0.1.0"
