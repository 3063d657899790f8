"""Tests for thread, message and run operations."""

import json
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from foundry_agents.core.constants import RunStatus
from foundry_agents.core.exceptions import (
    ResourceNotFoundError,
    RunFailedError,
    RunTimeoutError,
    ServiceContractViolation,
)
from foundry_agents.models.conversation import Run
from foundry_agents.services.conversation_ops import ConversationService

from tests.conftest import UNIFIED_HOST, api_path


def _run(status, **extra):
    return {"id": "run_1", "thread_id": "thread_1", "assistant_id": "asst_1", "status": status, **extra}


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def mock_client():
    """API client whose run status responses are scripted per test."""
    return MagicMock()


@pytest.fixture
def conversation(mock_client, sleeps):
    return ConversationService(mock_client, sleep=sleeps.append)


class TestWaitForRun:
    """The bounded polling loop."""

    def test_times_out_after_max_polls(self, conversation, mock_client, sleeps):
        mock_client.call.return_value = _run("in_progress")

        with pytest.raises(RunTimeoutError) as exc_info:
            conversation.wait_for_run(Run.model_validate(_run("queued")))

        assert exc_info.value.polls == 100
        assert exc_info.value.status == "in_progress"
        assert sleeps == [10] * 100
        assert mock_client.call.call_count == 100

    def test_returns_when_completed(self, conversation, mock_client, sleeps):
        mock_client.call.side_effect = [_run("in_progress"), _run("in_progress"), _run("completed")]

        run = conversation.wait_for_run(Run.model_validate(_run("queued")))

        assert run.status == RunStatus.COMPLETED
        assert len(sleeps) == 3
        mock_client.call.assert_called_with(
            "threads", "threadStatus", path="thread_1/runs/run_1", use_open_prefix=True
        )

    def test_already_completed_does_not_poll(self, conversation, mock_client, sleeps):
        run = conversation.wait_for_run(Run.model_validate(_run("completed")))
        assert run.status == RunStatus.COMPLETED
        assert sleeps == []
        mock_client.call.assert_not_called()

    def test_requires_action_returns_early(self, conversation, mock_client):
        action = {"type": "submit_tool_outputs", "submit_tool_outputs": {"tool_calls": []}}
        mock_client.call.return_value = _run("requires_action", required_action=action)

        run = conversation.wait_for_run(Run.model_validate(_run("queued")))

        assert run.status == RunStatus.REQUIRES_ACTION
        assert run.required_action == action

    @pytest.mark.parametrize("status", ["failed", "cancelled", "expired", "incomplete"])
    def test_terminal_failures(self, conversation, mock_client, status):
        mock_client.call.return_value = _run(status, last_error={"code": "server_error", "message": "Boom"})

        with pytest.raises(RunFailedError) as exc_info:
            conversation.wait_for_run(Run.model_validate(_run("in_progress")))

        assert exc_info.value.status == status
        assert exc_info.value.reason == "Boom"

    def test_custom_budget(self, mock_client, sleeps):
        service = ConversationService(mock_client, poll_interval=0.5, max_polls=3, sleep=sleeps.append)
        mock_client.call.return_value = _run("queued")

        with pytest.raises(RunTimeoutError):
            service.wait_for_run(Run.model_validate(_run("queued")))
        assert sleeps == [0.5, 0.5, 0.5]


class TestRunSync:
    """Synchronous runs."""

    def test_collects_messages(self, conversation, mock_client):
        mock_client.call.side_effect = [_run("queued"), _run("completed")]
        mock_client.list_all.return_value = [
            {"id": "msg_2", "role": "assistant", "content": [{"type": "text", "text": {"value": "It is sunny."}}]},
        ]

        outcome = conversation.run_sync("thread_1", "asst_1")

        assert outcome.run.status == RunStatus.COMPLETED
        assert outcome.response_text == "It is sunny."
        mock_client.list_all.assert_called_once_with(
            "threads",
            "messages",
            path="thread_1/messages",
            params={"order": "asc", "run_id": "run_1"},
            use_open_prefix=True,
        )

    def test_requires_action_skips_messages(self, conversation, mock_client):
        mock_client.call.side_effect = [_run("requires_action", required_action={"type": "submit_tool_outputs"})]
        outcome = conversation.run_sync("thread_1", "asst_1")

        assert outcome.messages == []
        mock_client.list_all.assert_not_called()

    def test_run_without_id(self, conversation, mock_client):
        mock_client.call.return_value = {"status": "queued"}
        with pytest.raises(ServiceContractViolation):
            conversation.create_run("thread_1", "asst_1")


class TestOverHttp:
    """Thread and message requests on the wire."""

    @respx.mock
    def test_ask(self, client):
        respx.post(host=UNIFIED_HOST, path=api_path("threads")).mock(
            return_value=httpx.Response(200, json={"id": "thread_9"})
        )
        message_route = respx.post(host=UNIFIED_HOST, path=api_path("threads", "thread_9", "messages")).mock(
            return_value=httpx.Response(200, json={"id": "msg_1", "role": "user", "content": []})
        )
        run_route = respx.post(host=UNIFIED_HOST, path=api_path("threads", "thread_9", "runs")).mock(
            return_value=httpx.Response(200, json={"id": "run_9", "thread_id": "thread_9", "status": "completed"})
        )
        respx.get(host=UNIFIED_HOST, path=api_path("threads", "thread_9", "messages")).mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": [{"id": "msg_2", "role": "assistant", "content": [{"type": "text", "text": {"value": "42"}}]}],
                    "has_more": False,
                },
            )
        )

        outcome = ConversationService(client, sleep=lambda _: None).ask("asst_1", "What is the answer?")

        assert outcome.response_text == "42"
        assert json.loads(message_route.calls.last.request.content) == {
            "role": "user",
            "content": "What is the answer?",
        }
        assert json.loads(run_route.calls.last.request.content) == {"assistant_id": "asst_1"}

    @respx.mock
    def test_missing_thread(self, client):
        respx.get(host=UNIFIED_HOST, path=api_path("threads", "thread_x")).mock(
            return_value=httpx.Response(404, json={"error": {"message": "No thread found"}})
        )
        with pytest.raises(ResourceNotFoundError, match="Thread 'thread_x' not found"):
            ConversationService(client).get_thread("thread_x")

    @respx.mock
    def test_submit_tool_outputs(self, client):
        route = respx.post(
            host=UNIFIED_HOST, path=api_path("threads", "thread_1", "runs", "run_1", "submit_tool_outputs")
        ).mock(return_value=httpx.Response(200, json=_run("queued")))

        run = ConversationService(client).submit_tool_outputs(
            "thread_1", "run_1", [{"tool_call_id": "call_1", "output": "sunny"}]
        )

        assert run.status == RunStatus.QUEUED
        assert json.loads(route.calls.last.request.content) == {
            "tool_outputs": [{"tool_call_id": "call_1", "output": "sunny"}]
        }
