"""Tests for the click CLI."""

from __future__ import annotations

import re

from click.testing import CliRunner

from app.cli import _points_table, _state_line, cli
from chart.series import Point
from data.errors import NetworkError
from poller.loop import PollerState


class TestFetchCommand:
    def test_prints_quote(self, monkeypatch, make_provider, make_payload) -> None:
        provider = make_provider([make_payload("426.75")])
        monkeypatch.setattr("data.providers.get_provider", lambda *a, **kw: provider)

        result = CliRunner().invoke(cli, ["fetch"])

        assert result.exit_code == 0, result.output
        assert "DIA" in result.output
        assert "426.7500" in result.output

    def test_network_error_exits_1(self, monkeypatch, make_provider) -> None:
        provider = make_provider([NetworkError("HTTP error code 503", status_code=503)])
        monkeypatch.setattr("data.providers.get_provider", lambda *a, **kw: provider)

        result = CliRunner().invoke(cli, ["fetch"])

        assert result.exit_code == 1
        assert "503" in result.output

    def test_nan_price_exits_1(self, monkeypatch, make_provider, make_payload) -> None:
        provider = make_provider([make_payload("abc")])
        monkeypatch.setattr("data.providers.get_provider", lambda *a, **kw: provider)

        result = CliRunner().invoke(cli, ["fetch"])

        assert result.exit_code == 1
        assert "Invalid price" in result.output


class TestPointsTable:
    def test_shows_recent_rows_with_change(self) -> None:
        points = [Point(i, 100.0 + i) for i in range(1, 21)]
        table = _points_table("DIA", points, "ticks=20 failures=0")
        assert table.row_count == 15
        assert table.caption == "ticks=20 failures=0"

    def test_empty(self) -> None:
        assert _points_table("DIA", [], "").row_count == 0


class TestWatchCommand:
    def test_failed_polls_are_counted(self, monkeypatch, make_provider) -> None:
        provider = make_provider([NetworkError("HTTP error code 503", status_code=503)] * 50)
        monkeypatch.setattr("data.providers.get_provider", lambda *a, **kw: provider)

        result = CliRunner().invoke(cli, ["watch", "--interval", "0.1", "--count", "3"])

        assert result.exit_code == 0, result.output
        match = re.search(
            r"Collected 0 point\(s\) for DIA \(ticks=(\d+) failures=(\d+)\)",
            result.output,
        )
        assert match is not None, result.output
        ticks, failures = int(match.group(1)), int(match.group(2))
        assert ticks >= 3
        assert failures == ticks

    def test_save_writes_chart(self, monkeypatch, make_provider, make_payload, tmp_path) -> None:
        provider = make_provider([make_payload("426.75")] * 50)
        monkeypatch.setattr("data.providers.get_provider", lambda *a, **kw: provider)
        out = tmp_path / "chart.html"

        result = CliRunner().invoke(
            cli, ["watch", "--interval", "0.1", "--count", "2", "--save", str(out)]
        )

        assert result.exit_code == 0, result.output
        assert "failures=0" in result.output
        assert out.exists()
        assert "DIA Price" in out.read_text(encoding="utf-8")


class TestStateLine:
    def test_reflects_failures_without_points(self) -> None:
        state = PollerState(ticks=4, failures=4)
        table = _points_table("DIA", [], _state_line(state))
        assert table.caption == "ticks=4 failures=4"
        assert table.row_count == 0
