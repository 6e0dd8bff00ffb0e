from elbman.domain.types.base import BaseInfo, Link
from elbman.domain.types.server_array import ServerArrayInfo
from elbman.domain.types.task import TaskInfo, TaskState, classify_summary

"""
Domain models (ServerArray, Task).
"""
