"""Tests for the invalidate CLI commands."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from storecache.cache import runtime
from storecache.cache.invalidation import CacheInvalidator
from storecache.cli import app
from storecache.config import settings
from storecache.observability import logging as logging_module

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_environment(monkeypatch, metrics):
    """Run the CLI against an in-memory store without touching global logging."""
    monkeypatch.setattr(settings, "cache_backend", "memory")
    monkeypatch.setattr(logging_module, "configure_logging", lambda **kwargs: None)
    monkeypatch.setattr(runtime, "_invalidator", None)
    monkeypatch.setattr(runtime, "_hooks", None)
    yield


def _use_store(monkeypatch, store, metrics) -> None:
    async def fake_get_invalidator():
        return CacheInvalidator(store, metrics=metrics)

    monkeypatch.setattr(runtime, "get_invalidator", fake_get_invalidator)


class TestInvalidateCommands:
    """Tests for storecache invalidate ..."""

    def test_shift_json(self) -> None:
        result = runner.invoke(
            app, ["invalidate", "shift", "shift-1", "store-9", "2024-01-15", "--format", "json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data == {
            "success": True,
            "invalidated_keys": [
                "shift:summary:shift-1",
                "report:z:shift-1",
                "day:summary:store-9:2024-01-15",
                "report:*:store-9:*",
            ],
            "errors": [],
        }

    def test_store_table(self) -> None:
        result = runner.invoke(app, ["invalidate", "store", "store-9"])

        assert result.exit_code == 0, result.output
        assert "day:summary:store-9:*" in result.output
        assert "invalidated" in result.output

    def test_lookup_with_store(self) -> None:
        result = runner.invoke(
            app, ["invalidate", "lookup", "client-A", "--store", "store-7", "-f", "json"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["invalidated_keys"][-1] == "config:tax-rates:store-7"

    def test_tender_type_defaults(self) -> None:
        result = runner.invoke(app, ["invalidate", "tender-type", "-f", "json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["invalidated_keys"] == ["config:tenders:null"]

    def test_partial_failure_exits_1(self, monkeypatch, flaky_store, metrics) -> None:
        flaky_store.fail_on.add("report:*:store-9:*")
        _use_store(monkeypatch, flaky_store, metrics)

        result = runner.invoke(app, ["invalidate", "day", "store-9", "2024-01-15", "-f", "json"])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["success"] is False
        assert data["errors"] == [
            "store reports: delete_by_pattern report:*:store-9:* failed: connection reset by peer"
        ]

    def test_invalid_date_exits_2(self, monkeypatch, flaky_store, metrics) -> None:
        _use_store(monkeypatch, flaky_store, metrics)

        result = runner.invoke(app, ["invalidate", "day", "store-9", "15-01-2024"])

        assert result.exit_code == 2
        assert "Invalid identifier" in result.output
        assert flaky_store.calls == []

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "invalidate" in result.output
