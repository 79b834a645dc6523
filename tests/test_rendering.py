"""Tests for the Rich renderers (cli/rendering.py)."""

from __future__ import annotations

import io
import json
import re
from datetime import datetime, timezone

import pytest
from rich.console import Console

from shuttle.cli.rendering import (
    color_agent_type,
    color_boundary,
    color_status,
    format_key_value,
    format_timestamp,
    output,
    render_table,
    to_json,
    truncate,
)


def _plain(renderable: object) -> str:
    console = Console(file=io.StringIO(), width=120, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestRenderTable:
    def test_headers_and_rows_in_order(self) -> None:
        table = render_table(["ID", "Status"], [["w-1", "pending"], ["w-2", "completed"]])

        assert [column.header for column in table.columns] == ["ID", "Status"]
        assert table.row_count == 2
        text = _plain(table)
        assert text.index("w-1") < text.index("w-2")

    def test_empty_rows_still_show_headers(self) -> None:
        table = render_table(["ID", "Status"], [])

        assert table.row_count == 0
        assert "Status" in _plain(table)

    def test_row_length_mismatch(self) -> None:
        with pytest.raises(ValueError):
            render_table(["ID", "Status"], [["w-1"]])


def test_key_value_shows_dash_for_missing() -> None:
    text = _plain(format_key_value({"Handle": None, "Type": "claude-code"}))

    assert re.search(r"^Handle:\s+-\s*$", text, re.MULTILINE)
    assert "claude-code" in text


class TestTruncate:
    def test_short_value_untouched(self) -> None:
        assert truncate("hello", 10) == "hello"

    def test_exact_length_untouched(self) -> None:
        assert truncate("hello", 5) == "hello"

    def test_long_value_gets_ellipsis(self) -> None:
        assert truncate("hello world", 8) == "hello..."
        assert len(truncate("a" * 100, 40)) == 40

    def test_tiny_limit_cuts_without_ellipsis(self) -> None:
        assert truncate("hello", 2) == "he"
        assert truncate("hello", 0) == ""

    def test_none_is_empty(self) -> None:
        assert truncate(None, 10) == ""


class TestColorizers:
    @pytest.mark.parametrize(
        ("value", "style"),
        [("completed", "green"), ("failed", "red"), ("online", "green"), ("in-use", "yellow")],
    )
    def test_known_status_is_styled(self, value: str, style: str) -> None:
        text = color_status(value)

        assert text.plain == value
        assert text.style == style

    @pytest.mark.parametrize(("value", "plain"), [("paused", "paused"), ("", ""), (None, ""), (42, "42")])
    def test_unknown_status_is_unstyled(self, value: object, plain: str) -> None:
        text = color_status(value)

        assert text.plain == plain
        assert text.style == ""

    def test_agent_type(self) -> None:
        assert color_agent_type("claude-code").style == "cyan"
        assert color_agent_type("gpt-agent").style == ""

    def test_boundary(self) -> None:
        assert color_boundary("production").style == "bold red"
        assert color_boundary("team-x").plain == "team-x"

    def test_markup_in_unknown_value_is_literal(self) -> None:
        assert _plain(color_boundary("[red]team[/red]")).strip() == "[red]team[/red]"


class TestMarkupSafety:
    def test_table_cells_are_not_markup(self) -> None:
        table = render_table(["Description", "Capability"], [["close the [/] tag", "[red]python"]])

        text = _plain(table)

        assert "close the [/] tag" in text
        assert "[red]python" in text

    def test_key_value_values_are_not_markup(self) -> None:
        text = _plain(format_key_value({"Description": "[bold]loud[/bold] and [/]"}))

        assert "[bold]loud[/bold] and [/]" in text

    def test_styled_cells_keep_their_style(self) -> None:
        table = render_table(["Status"], [[color_status("failed")]])

        assert "failed" in _plain(table)


class TestFormatTimestamp:
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_is_placeholder(self, value: object) -> None:
        assert format_timestamp(value) == "N/A"

    def test_utc_string_is_localised(self) -> None:
        expected = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc).astimezone().strftime("%c")

        assert format_timestamp("2024-01-15T10:30:00Z") == expected

    def test_naive_value_is_treated_as_utc(self) -> None:
        assert format_timestamp("2024-01-15T10:30:00") == format_timestamp("2024-01-15T10:30:00+00:00")

    def test_unparseable_value_is_returned(self) -> None:
        assert format_timestamp("yesterday") == "yesterday"


class TestJsonOutput:
    def test_all_fields_kept(self) -> None:
        payload = {"id": "w-1", "unknownField": {"nested": [1, 2]}, "status": None}

        assert json.loads(to_json(payload)) == payload

    def test_non_ascii_kept_verbatim(self) -> None:
        assert "café" in to_json({"description": "café"})

    def test_output_json_mode_prints_payload(self, capsys: pytest.CaptureFixture[str]) -> None:
        output({"agents": []}, json_mode=True, build=lambda: pytest.fail("builder must not run"))

        assert json.loads(capsys.readouterr().out) == {"agents": []}

    def test_output_table_mode_uses_builder(self, capsys: pytest.CaptureFixture[str]) -> None:
        output([{"id": "w-1"}], json_mode=False, build=lambda: render_table(["ID"], [["w-1"]]))

        assert "w-1" in capsys.readouterr().out
