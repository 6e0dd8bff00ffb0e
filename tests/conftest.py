import logging
import os
from collections import defaultdict
from typing import Dict, List
from unittest.mock import MagicMock

import pytest

from elbman.domain.types.server_array import ServerArrayInfo
from elbman.domain.types.task import TaskInfo

API_URL = "https://rs.test"


class FakeTaskApi:
    """Serves scripted summaries; the last one repeats once a script runs out."""

    def __init__(self, summaries: Dict[str, List[str]]):
        self.summaries = summaries
        self.calls: Dict[str, int] = defaultdict(int)
        self.order: List[str] = []

    def show(self, task):
        href = task.href if isinstance(task, TaskInfo) else task
        script = self.summaries[href]
        summary = script[min(self.calls[href], len(script) - 1)]
        self.calls[href] += 1
        self.order.append(href)
        return TaskInfo(href=href, summary=summary)


class FakeApi:
    def __init__(self):
        self.api_url = API_URL
        self.server_array = MagicMock()
        self.task = FakeTaskApi({})


def server_array(name: str, id: int = 1) -> ServerArrayInfo:
    return ServerArrayInfo.from_json(
        {"name": name, "links": [{"rel": "self", "href": f"/api/server_arrays/{id}"}]}
    )


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def logger():
    return logging.getLogger("elbman.tests")


@pytest.fixture(autouse=True)
def clean_rs_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("RS_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_server_array():
    return server_array


@pytest.fixture
def make_task_api():
    return FakeTaskApi
