"""Rendering of intermediate results for the --show-* options."""

from __future__ import annotations

import dataclasses
import json
import pprint
import re
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

import click
import yaml

from triagebot.logging import truncate_output

FORMATS = ("json", "yaml", "repr")

_DIAGNOSTICS = re.compile(
    r"\n---+\s*<details><summary>(Diagnostic Information)[\s\S]*?</details>"
)


def collapse_diagnostics(text: str) -> str:
    """Replace the diagnostic details block of a comment with a placeholder."""
    return _DIAGNOSTICS.sub(r"...\1...", text)


def to_plain(value: Any) -> Any:
    """Convert models into JSON/YAML friendly data, collapsing long strings."""
    if isinstance(value, str):
        return truncate_output(collapse_diagnostics(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return [to_plain(v) for v in sorted(value, key=str)]
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def render(value: Any, fmt: str | None = None) -> str:
    """Render a value in the given format (defaults to ``repr``)."""
    plain = to_plain(value)
    if fmt == "json":
        return json.dumps(plain, indent=2, ensure_ascii=False)
    if fmt == "yaml":
        return yaml.safe_dump(plain, sort_keys=False, allow_unicode=True).rstrip("\n")
    return pprint.pformat(plain, width=100, sort_dicts=False)


def make_show(fmt: str | None, echo: Callable[[str], None] = click.echo) -> Callable[[str, Any], None]:
    """Build a ``show(name, value)`` printer for one output format."""

    def show(name: str, value: Any) -> None:
        echo(f"  === {name} ===")
        echo(re.sub(r"^", "  ", render(value, fmt), flags=re.MULTILINE))

    return show
