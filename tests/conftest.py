"""Shared pytest fixtures for njson tests."""
from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture()
def tmp_njson_file(tmp_path: Path):
    """Return a factory that writes text to a temporary .njson file."""

    def _make(text: str, name: str = "doc.njson") -> Path:
        p = tmp_path / name
        p.write_bytes(text.encode("utf-8"))
        return p

    return _make


@pytest.fixture()
def project_text() -> str:
    return '{"name":"NJson","version":1,"ratio":1.5,"flag":true,"tags":["a","b"]}'


@pytest.fixture()
def commented_text() -> str:
    return "\n".join([
        "// save file",
        "{",
        '    "player": {',
        '        "name": "Ann", /* display name */',
        '        "initial": \'A\',',
        '        "stats": {"level": 3, "ratio": 0.75}',
        "    },",
        '    "pets": [',
        '        {"name": "Rex", "info": {"kind": "dog"}},',
        "    ],",
        '    "unlocked": null',
        "}",
    ])
