"""
Tests for the RightScale API client with the HTTP session patched out.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from elbman.api.api import Api
from elbman.domain.types.server_array import ServerArrayInfo
from elbman.domain.types.task import TaskInfo, TaskState
from elbman.errors import AuthenticationError, ConfigurationError

API_URL = "https://rs.test"
OAUTH2_URL = "https://rs.test/api/oauth2"
TASK_HREF = "/api/clouds/1/instances/A/live/tasks/ae-1"


def make_response(status_code=200, body=None, headers=None, url=API_URL):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    response.headers.update(headers or {})
    response.url = url
    response.reason = "OK" if status_code < 400 else "Error"
    return response


TOKEN_RESPONSE = make_response(body={"access_token": "access-1", "expires_in": 7200})


@pytest.fixture
def api():
    return Api(
        api_url=API_URL,
        refresh_token="refresh-1",
        oauth2_api_url=OAUTH2_URL,
        retry_count=3,
        retry_sleep_sec=0,
    )


def route(*responses, token_response=TOKEN_RESPONSE):
    """Session.request stub: token exchange first, then the given responses in order."""
    queue = list(responses)

    def request(http_method, url, **kwargs):
        if url == OAUTH2_URL:
            return token_response
        return queue.pop(0)

    return MagicMock(side_effect=request)


def test_server_array_list_authenticates_and_filters(api):
    body = [
        {"name": "foo_sa1", "links": [{"rel": "self", "href": "/api/server_arrays/1"}]},
        {"name": "foo_sa", "state": "enabled", "links": [{"rel": "self", "href": "/api/server_arrays/2"}]},
    ]
    request = route(make_response(body=body))

    with patch.object(api._session, "request", request):
        arrays = api.server_array.get_list(filter=["name==foo_sa"])

    assert [sa.name for sa in arrays] == ["foo_sa1", "foo_sa"]
    assert arrays[1].href == "/api/server_arrays/2"
    assert all(isinstance(sa, ServerArrayInfo) for sa in arrays)

    token_call, list_call = request.call_args_list
    assert token_call.args == ("POST", OAUTH2_URL)
    assert token_call.kwargs["data"] == {"grant_type": "refresh_token", "refresh_token": "refresh-1"}
    assert token_call.kwargs["headers"]["X-API-Version"] == "1.5"

    assert list_call.args == ("GET", API_URL + "/api/server_arrays")
    assert list_call.kwargs["params"] == [("filter[]", "name==foo_sa")]
    assert list_call.kwargs["headers"]["Authorization"] == "Bearer access-1"
    assert list_call.kwargs["headers"]["X-API-Version"] == "1.5"


def test_token_is_reused(api):
    request = route(make_response(body=[]), make_response(body=[]))

    with patch.object(api._session, "request", request):
        api.server_array.get_list()
        api.server_array.get_list()

    urls = [call.args[1] for call in request.call_args_list]
    assert urls.count(OAUTH2_URL) == 1


def test_multi_run_executable(api):
    request = route(make_response(status_code=202, headers={"Location": TASK_HREF}))
    server_array = ServerArrayInfo(name="foo_sa", href="/api/server_arrays/2")

    with patch.object(api._session, "request", request):
        task = api.server_array.multi_run_executable(
            server_array,
            right_script_href="/api/right_scripts/438671001",
            inputs={"ELB_NAME": "text:foo_elb"},
        )

    assert task.href == TASK_HREF
    run_call = request.call_args_list[-1]
    assert run_call.args == ("POST", API_URL + "/api/server_arrays/2/multi_run_executable")
    assert run_call.kwargs["data"] == [
        ("right_script_href", "/api/right_scripts/438671001"),
        ("inputs[ELB_NAME]", "text:foo_elb"),
    ]


def test_multi_run_executable_without_location(api):
    request = route(make_response(status_code=202))

    with patch.object(api._session, "request", request):
        with pytest.raises(RuntimeError):
            api.server_array.multi_run_executable("/api/server_arrays/2", "/api/right_scripts/1")


def test_task_show_is_never_cached(api):
    request = route(
        make_response(body={"summary": "queued"}),
        make_response(body={"summary": "completed: ok"}),
    )
    task = TaskInfo(href=TASK_HREF)

    with patch.object(api._session, "request", request):
        first = api.task.show(task)
        second = api.task.show(task)

    assert first.state is TaskState.PENDING
    assert second.state is TaskState.COMPLETED
    assert second.href == TASK_HREF
    assert request.call_args_list[-1].args == ("GET", API_URL + TASK_HREF)


def test_client_error_is_not_retried(api):
    request = route(make_response(status_code=404, body={"error": "not found"}))

    with patch.object(api._session, "request", request):
        with pytest.raises(requests.exceptions.HTTPError):
            api.get("/api/server_arrays/9")

    assert request.call_count == 2  # token + one attempt


def test_server_error_is_retried(api):
    request = route(make_response(status_code=503), make_response(body={"summary": "running"}))

    with patch.object(api._session, "request", request):
        task = api.task.show(TASK_HREF)

    assert task.summary == "running"


def test_retry_limit(api):
    request = route(*[make_response(status_code=500) for _ in range(3)])

    with patch.object(api._session, "request", request):
        with pytest.raises(requests.exceptions.RetryError):
            api.get("/api/server_arrays")


def test_unauthorized_refreshes_token(api):
    request = route(make_response(status_code=401), make_response(body=[]))

    with patch.object(api._session, "request", request):
        assert api.server_array.get_list() == []

    urls = [call.args[1] for call in request.call_args_list]
    assert urls.count(OAUTH2_URL) == 2


def test_unauthorized_twice_gives_up(api):
    request = route(make_response(status_code=401), make_response(status_code=401))

    with patch.object(api._session, "request", request):
        with pytest.raises(requests.exceptions.HTTPError):
            api.get("/api/server_arrays")

    urls = [call.args[1] for call in request.call_args_list]
    assert urls.count(OAUTH2_URL) == 2
    assert len(urls) == 4


def test_rejected_refresh_token_fails_fast():
    api = Api(
        api_url=API_URL,
        refresh_token="revoked",
        oauth2_api_url=OAUTH2_URL,
        retry_count=10,
        retry_sleep_sec=1,
    )
    request = route(token_response=make_response(status_code=401, url=OAUTH2_URL))

    with patch.object(api._session, "request", request), patch(
        "elbman.io.network_exceptions.time.sleep"
    ) as sleep:
        with pytest.raises(AuthenticationError, match="refresh token"):
            api.get("/api/server_arrays")

    assert request.call_count == 1
    assert request.call_args.args == ("POST", OAUTH2_URL)
    sleep.assert_not_called()


def test_task_with_null_summary_is_pending(api):
    request = route(make_response(body={"summary": None}))

    with patch.object(api._session, "request", request):
        task = api.task.show(TASK_HREF)

    assert task.summary == ""
    assert task.state is TaskState.PENDING


def test_missing_refresh_token():
    api = Api(api_url=API_URL, retry_count=1)

    with pytest.raises(ConfigurationError, match="refresh token"):
        api.get("/api/server_arrays")


def test_relative_method_names(api):
    assert api._prepare_url("server_arrays") == API_URL + "/api/server_arrays"
    assert api._prepare_url("/api/tasks/1") == API_URL + "/api/tasks/1"
    assert api._prepare_url("https://other.test/x") == "https://other.test/x"
