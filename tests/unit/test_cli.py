"""Tests for the postbox CLI."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from postbox import __version__
from postbox.cli import app

runner = CliRunner()


class TestCli:
    """Tests for CLI commands."""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_demo_memory(self):
        result = runner.invoke(
            app,
            ["demo", "-n", "2", "--delay-mode", "constant", "--delay", "0", "--persistence", "memory"],
        )

        assert result.exit_code == 0, result.output
        assert "4/4 delivered" in result.output
        assert result.output.count("published") == 4

    def test_demo_then_history(self, tmp_path: Path):
        store = tmp_path / "messages.json"

        demo = runner.invoke(
            app,
            ["demo", "-n", "1", "--delay-mode", "constant", "--delay", "0", "--path", str(store)],
        )
        history = runner.invoke(app, ["history", "--persistence", "file", "--path", str(store)])

        assert demo.exit_code == 0, demo.output
        records = json.loads(store.read_text())
        assert len(records) == 2
        assert all(r["timestamp_delivered"] is not None for r in records)
        assert history.exit_code == 0, history.output
        assert "2 stored messages" in history.output

    def test_history_malformed_store(self, tmp_path: Path):
        store = tmp_path / "messages.json"
        store.write_text("{broken")

        result = runner.invoke(app, ["history", "--persistence", "file", "--path", str(store)])

        assert result.exit_code == 1
        assert "Error" in result.output
