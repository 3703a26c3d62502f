from __future__ import annotations

import runpy
from pathlib import Path

import pytest


def test_module_entrypoint_exits_with_cli_code(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(
        "sys.argv", ["stepsy", "--db", str(tmp_path / "app.sqlite3"), "history"]
    )
    with pytest.raises(SystemExit) as exc:
        runpy.run_module("stepsy", run_name="__main__")
    assert exc.value.code == 0
