# tests/unit/cli/test_cli_formatters.py
"""Tests for CLI table and error rendering."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from portal_schema.cli_formatters import _truncate, format_error, print_view_console, view_to_json
from portal_schema.views import MANIFEST_ATTRIBUTES_COLUMNS, AttributeRow, ViewTable


def _row(attr_id: str, valid_values: tuple[str, ...] = ()) -> AttributeRow:
    return AttributeRow(
        id=attr_id,
        attribute=attr_id,
        label=attr_id,
        description="",
        required="False",
        data_type="string",
        valid_values=valid_values,
        conditional_if=(),
        manifest_names=("M",),
    )


class TestTruncate:
    def test_short_lists_joined(self) -> None:
        assert _truncate(["a", "b"]) == "a, b"

    def test_long_lists_cut(self) -> None:
        assert _truncate([str(i) for i in range(5)], limit=3) == "0, 1, 2, … (+2 more)"


class TestViewRendering:
    def test_console_table_title_counts_rows(self) -> None:
        buffer = io.StringIO()
        view = ViewTable("v", "Things", MANIFEST_ATTRIBUTES_COLUMNS, (_row("a"), _row("b")))

        print_view_console(view, console=Console(file=buffer, width=200))

        output = buffer.getvalue()
        assert "Things (2)" in output
        assert "Valid Values" in output

    def test_json_payload(self) -> None:
        view = ViewTable("v", "Things", MANIFEST_ATTRIBUTES_COLUMNS, (_row("a", ("x",)),))

        payload = view_to_json(view)

        assert payload["view"] == "v"
        assert payload["columns"][0] == "Attribute"
        assert payload["rows"][0]["valid_values"] == ["x"]


def test_format_error_writes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    format_error(title="Broken", message="Something failed", hint="Try again", details=["detail one"])

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Broken" in captured.err
    assert "detail one" in captured.err
