from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.shift_attendance.shift_attendance.core.exceptions import StorageFailure
from src.shift_attendance.shift_attendance.sweep import cli
from src.shift_attendance.shift_attendance.sweep.service import SweepResult


def _settings(user="sweeper", password="pw"):
    return SimpleNamespace(LOG_LEVEL="WARNING", SWEEP_DB_CONFIG={"host": "localhost", "user": user, "password": password})


class _FakeSweep:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.dry_runs = []

    def run(self, *, dry_run=False):
        self.dry_runs.append(dry_run)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def wire(monkeypatch):
    def _wire(settings, sweep=None):
        monkeypatch.setattr(cli, "load_dotenv", lambda **kwargs: None)
        monkeypatch.setattr(cli, "importlib", SimpleNamespace(import_module=lambda name: settings))
        built = []

        def fake_build(*, settings, db_config):
            built.append(db_config)
            return sweep

        monkeypatch.setattr(cli, "build_sweep_service", fake_build)
        return built

    return _wire


@pytest.mark.parametrize("user,password", [("", "pw"), ("sweeper", ""), ("", "")])
def test_missing_credentials_exit_non_zero(wire, capsys, user, password):
    built = wire(_settings(user, password))

    assert cli.main([]) == 1
    assert "Missing SWEEP_DB_USER or SWEEP_DB_PASSWORD env vars." in capsys.readouterr().err
    assert built == []


def test_success_reports_written_count(wire, capsys):
    sweep = _FakeSweep(SweepResult(candidates=5, already_recorded=2, written=3, chunks=1, ran_at="2026-01-18T20:00:00.000Z"))
    built = wire(_settings(), sweep)

    assert cli.main([]) == 0
    assert "Swept 3 missed shifts." in capsys.readouterr().out
    assert built[0]["user"] == "sweeper"
    assert sweep.dry_runs == [False]


def test_dry_run_flag(wire, capsys):
    sweep = _FakeSweep(SweepResult(candidates=5, already_recorded=2, written=0, chunks=0, ran_at="2026-01-18T20:00:00.000Z"))
    wire(_settings(), sweep)

    assert cli.main(["--dry-run"]) == 0
    assert "3 shifts would be marked missed" in capsys.readouterr().out
    assert sweep.dry_runs == [True]


def test_storage_failure_exit_non_zero(wire, capsys):
    wire(_settings(), _FakeSweep(error=StorageFailure("connection refused")))

    assert cli.main([]) == 1
    assert "Swept" not in capsys.readouterr().out
