"""Unit tests for the --show-* output rendering."""

import json

import pytest
import yaml

from triagebot.display import collapse_diagnostics, make_show, render, to_plain
from triagebot.pr_info import CIResult
from triagebot.planner import MoveToColumn, PostComment

STATUS = (
    "Thanks!\n\n----------------------\n<details><summary>Diagnostic Information: triagebot"
    "</summary>\n\n```json\n{}\n```\n</details>"
)


@pytest.mark.unit
class TestCollapse:
    """Tests for collapse_diagnostics."""

    def test_collapses_details_block(self) -> None:
        assert collapse_diagnostics(STATUS) == "Thanks!\n...Diagnostic Information..."

    def test_plain_text_unchanged(self) -> None:
        assert collapse_diagnostics("no details here") == "no details here"


@pytest.mark.unit
class TestRender:
    """Tests for render and to_plain."""

    def test_to_plain_dataclass(self) -> None:
        assert to_plain(PostComment(tag="status", body=STATUS)) == {
            "kind": "post_comment",
            "tag": "status",
            "body": "Thanks!\n...Diagnostic Information...",
        }

    def test_to_plain_enum(self) -> None:
        assert to_plain([CIResult.FAIL]) == ["fail"]

    def test_json(self) -> None:
        out = render([MoveToColumn(column="Done")], "json")

        assert json.loads(out) == [{"kind": "move_to_column", "column": "Done"}]

    def test_yaml(self) -> None:
        out = render({"a": 1}, "yaml")

        assert yaml.safe_load(out) == {"a": 1}

    def test_default_is_repr(self) -> None:
        assert render({"a": 1}) == "{'a': 1}"


@pytest.mark.unit
class TestMakeShow:
    """Tests for make_show."""

    def test_prints_header_and_indents(self) -> None:
        lines: list[str] = []
        show = make_show("json", echo=lines.append)

        show("Actions", [1])

        assert lines[0] == "  === Actions ==="
        assert lines[1] == "  [\n    1\n  ]"
