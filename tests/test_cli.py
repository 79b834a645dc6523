"""End-to-end tests of the Typer app.

The transport factory on :class:`AppContext` is replaced by one returning an
in-memory transport; configuration always lives in a temporary file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from shuttle import __version__
from shuttle.cli.context import AppContext
from shuttle.cli.main import app
from shuttle.core.config import Configuration
from shuttle.core.domain.envelope import Envelope
from shuttle.core.domain.operations import Operation

runner = CliRunner()


@pytest.fixture
def invoke(config_path: Path, make_transport):
    """Run the CLI against a fake transport; returns (result, transport, configs)."""

    def _invoke(*args: str, responses: dict[Operation, Envelope[Any]] | None = None, input: str | None = None):
        transport = make_transport(responses)
        configs: list[Configuration] = []

        def factory(config: Configuration, pool: Any = None) -> Any:
            configs.append(config)
            return transport

        result = runner.invoke(
            app,
            ["--config", str(config_path), *args],
            obj=AppContext(transport_factory=factory),
            input=input,
        )
        return result, transport, configs

    return _invoke


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


class TestConfigCommands:
    def test_set_then_get(self, invoke, config_path: Path) -> None:
        result, _, _ = invoke("config", "set", "projectId", "alpha")
        assert result.exit_code == 0, result.output
        assert json.loads(config_path.read_text(encoding="utf-8")) == {"projectId": "alpha"}

        result, _, _ = invoke("config", "get", "projectId")
        assert result.exit_code == 0
        assert result.output.strip() == "alpha"

    def test_set_rejects_invalid_value(self, invoke, config_path: Path) -> None:
        result, _, _ = invoke("config", "set", "natsUrl", "http://wrong:4222")

        assert result.exit_code == 1
        assert "natsUrl must start with nats://" in result.output
        assert not config_path.exists()

    def test_set_unknown_key(self, invoke) -> None:
        result, _, _ = invoke("config", "set", "colour", "blue")

        assert result.exit_code == 1
        assert "Unknown configuration key: colour" in result.output

    def test_list_json(self, invoke) -> None:
        result, _, _ = invoke("--json", "config", "list")

        assert result.exit_code == 0
        values = json.loads(result.stdout)
        assert values["projectId"] == "default"
        assert values["natsUrl"] == "nats://localhost:4222"

    def test_project_override_applies_to_get_and_list(self, invoke) -> None:
        result, _, _ = invoke("--project", "beta", "config", "get", "projectId")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "beta"

        result, _, _ = invoke("--project", "beta", "--json", "config", "list")
        assert json.loads(result.stdout)["projectId"] == "beta"

    def test_path(self, invoke, config_path: Path) -> None:
        result, _, _ = invoke("config", "path")

        assert result.output.strip() == str(config_path)

    def test_validate_reports_every_violation(self, invoke, config_path: Path) -> None:
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({"natsUrl": "tcp://x", "defaultPriority": 42}), encoding="utf-8")

        result, _, _ = invoke("--json", "config", "validate")

        assert result.exit_code == 1
        assert json.loads(result.stdout) == {
            "valid": False,
            "errors": [
                "natsUrl must start with nats://",
                "defaultPriority must be between 1 and 10",
            ],
        }


class TestRemoteCommands:
    def test_stats_json(self, invoke) -> None:
        stats = {"pending": 2, "active": 1, "completed": 10, "failed": 0, "total": 13}

        result, transport, _ = invoke("--json", "stats", responses={Operation.STATS: Envelope.success(200, stats)})

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == stats
        assert transport.calls == [(Operation.STATS, {}, None)]
        assert transport.closed

    def test_stats_table(self, invoke) -> None:
        result, _, _ = invoke("stats", responses={Operation.STATS: Envelope.success(200, {"pending": 4})})

        assert result.exit_code == 0
        assert "Coordinator Statistics (default)" in result.output
        assert "Pending" in result.output

    def test_project_override_reaches_transport(self, invoke) -> None:
        result, _, configs = invoke("--project", "beta", "--json", "stats")

        assert result.exit_code == 0
        assert configs[0].project_id == "beta"

    def test_work_show_not_found(self, invoke) -> None:
        result, _, _ = invoke(
            "work", "show", "w-404", responses={Operation.WORK_GET: Envelope.failure(404, "missing")}
        )

        assert result.exit_code == 1
        assert "Work item not found: w-404" in result.output

    def test_remote_error_is_reported(self, invoke) -> None:
        result, _, _ = invoke(
            "work", "list", responses={Operation.WORK_LIST: Envelope.failure(500, "Internal error")}
        )

        assert result.exit_code == 1
        assert "Failed to fetch work items: Internal error" in result.output

    def test_work_list_empty(self, invoke) -> None:
        result, _, _ = invoke("work", responses={Operation.WORK_LIST: Envelope.success(200, {"workItems": []})})

        assert result.exit_code == 0
        assert "No work items found" in result.output

    def test_remote_text_is_not_markup(self, invoke) -> None:
        items = {
            "workItems": [
                {"id": "w-1", "status": "pending", "capability": "[red]py", "description": "a [/] b"}
            ]
        }

        result, _, _ = invoke("work", "list", responses={Operation.WORK_LIST: Envelope.success(200, items)})

        assert result.exit_code == 0, result.output
        assert "[red]py" in result.output
        assert "a [/] b" in result.output

    def test_agent_details_with_markup_in_fields(self, invoke) -> None:
        agent = {"guid": "g-1", "handle": "[/]", "agentType": "[bold]x", "capabilities": ["[red]py"]}

        result, _, _ = invoke(
            "agents", "show", "g-1", responses={Operation.AGENT_DETAILS: Envelope.success(200, agent)}
        )

        assert result.exit_code == 0, result.output
        assert "[bold]x" in result.output
        assert "[red]py" in result.output

    @pytest.mark.parametrize(
        ("args", "operation", "payload"),
        [
            (("agents",), Operation.AGENTS_LIST, [{"guid": "a"}]),
            (("stats",), Operation.STATS, "ok"),
            (("work", "show", "w-1"), Operation.WORK_GET, [1, 2]),
            (("agents",), Operation.AGENTS_LIST, {"agents": {"guid": "a"}}),
            (("targets", "list"), Operation.TARGETS_LIST, {"targets": ["t-1"]}),
        ],
    )
    def test_unexpected_payload_shape(
        self, invoke, args: tuple[str, ...], operation: Operation, payload: Any
    ) -> None:
        result, _, _ = invoke(*args, responses={operation: Envelope.success(200, payload)})

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Unexpected response from coordinator" in result.output

    def test_agents_list(self, invoke) -> None:
        agents = {"agents": [{"guid": "g-1", "handle": "ada", "agentType": "claude-code", "status": "online"}]}

        result, transport, _ = invoke(
            "agents", "--type", "claude-code", responses={Operation.AGENTS_LIST: Envelope.success(200, agents)}
        )

        assert result.exit_code == 0, result.output
        assert "ada" in result.output
        assert transport.calls[0][1]["type"] == "claude-code"

    def test_submit_json(self, invoke) -> None:
        reply = {"workItemId": "w-1", "spinUpTriggered": False}

        result, transport, _ = invoke(
            "--json",
            "submit",
            "Fix the bug",
            "--boundary",
            "personal",
            "--capability",
            "python",
            "--priority",
            "8",
            responses={Operation.WORK_SUBMIT: Envelope.success(200, reply)},
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == reply
        operation, payload, _ = transport.calls[0]
        assert operation is Operation.WORK_SUBMIT
        assert payload["description"] == "Fix the bug"
        assert payload["boundary"] == "personal"
        assert payload["priority"] == 8

    def test_submit_missing_capability(self, invoke) -> None:
        result, transport, _ = invoke("--json", "submit", "Fix the bug", "--boundary", "personal")

        assert result.exit_code == 1
        assert "Capability is required" in result.output
        assert transport.calls == []

    def test_invalid_config_stops_remote_commands(self, invoke, config_path: Path) -> None:
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({"defaultPriority": 42}), encoding="utf-8")

        result, transport, _ = invoke("stats")

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert transport.calls == []


class TestShutdown:
    def test_declined_confirmation_sends_nothing(self, invoke) -> None:
        result, transport, _ = invoke("shutdown", "g-1", input="n\n")

        assert result.exit_code == 0
        assert "Shutdown cancelled" in result.output
        assert transport.calls == []

    def test_force_skips_grace_period(self, invoke) -> None:
        result, transport, _ = invoke(
            "shutdown",
            "g-1",
            "--force",
            "--yes",
            responses={Operation.AGENT_SHUTDOWN: Envelope.success(200, {"success": True})},
        )

        assert result.exit_code == 0, result.output
        assert "Agent shutdown requested" in result.output
        assert transport.calls == [
            (Operation.AGENT_SHUTDOWN, {"agentGuid": "g-1", "graceful": False, "gracePeriodMs": None}, "g-1")
        ]


class TestWatch:
    def test_stops_at_terminal_status(self, invoke) -> None:
        item = {"id": "w-1", "status": "completed", "result": {"summary": "done"}}

        result, transport, _ = invoke(
            "--json", "watch", "w-1", responses={Operation.WORK_GET: Envelope.success(200, item)}
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == item
        assert transport.calls == [(Operation.WORK_GET, {}, "w-1")]

    def test_failed_item_exits_with_error(self, invoke) -> None:
        item = {"id": "w-1", "status": "failed", "error": {"message": "boom"}}

        result, _, _ = invoke("watch", "w-1", responses={Operation.WORK_GET: Envelope.success(200, item)})

        assert result.exit_code == 1
        assert "Work item w-1 failed" in result.output
