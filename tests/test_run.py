"""Tests for the run.py entry point."""

import json
import os
from unittest.mock import patch, MagicMock

import pytest

import run
from costlocker_report.costlocker_client import ReportPage


_BASE_ENV = {
    "COSTLOCKER_API_URL": "https://costlocker.example.com/api/graphql",
    "COSTLOCKER_API_TOKEN": "secret-token",
    "REPORT_UUID": "2f1c4a3e-0000-4000-8000-000000000001",
}

_NO_ENV_FILE = ["--env", "/nonexistent/.env"]


def _run_main(argv, env, client=None):
    client = client or MagicMock()
    with patch.dict(os.environ, env, clear=True), \
         patch("costlocker_report.orchestrator.CostlockerGraphQLClient", return_value=client) as client_cls:
        run.main(_NO_ENV_FILE + argv)
    return client_cls


def test_missing_token_exits_before_any_request(capsys):
    env = dict(_BASE_ENV, COSTLOCKER_API_TOKEN="")
    with patch.dict(os.environ, env, clear=True), \
         patch("costlocker_report.orchestrator.CostlockerGraphQLClient") as client_cls:
        with pytest.raises(SystemExit) as exc_info:
            run.main(_NO_ENV_FILE)
    assert exc_info.value.code == 1
    client_cls.assert_not_called()
    captured = capsys.readouterr()
    assert "COSTLOCKER_API_TOKEN environment variable is required" in captured.err
    assert captured.out == ""


def test_empty_report_uuid_exits_before_any_request(capsys):
    env = dict(_BASE_ENV, REPORT_UUID="")
    with patch.dict(os.environ, env, clear=True), \
         patch("costlocker_report.orchestrator.CostlockerGraphQLClient") as client_cls:
        with pytest.raises(SystemExit) as exc_info:
            run.main(_NO_ENV_FILE)
    assert exc_info.value.code == 1
    client_cls.assert_not_called()
    assert "REPORT_UUID environment variable is required" in capsys.readouterr().err


def test_successful_run_prints_report(capsys):
    client = MagicMock()
    client.fetch_report_page.return_value = ReportPage(items=[{"id": 1}], total_items=1)

    _run_main([], _BASE_ENV, client)

    out = capsys.readouterr().out
    assert "=== Report Data ===" in out
    assert json.dumps([{"id": 1}], indent=2) in out
    assert "Items returned: 1" in out
    client.fetch_report_page.assert_called_once_with(
        _BASE_ENV["REPORT_UUID"],
        filter=None,
        pagination={"page": 1, "pageSize": 100},
        sorting=None,
    )


def test_cli_overrides_environment():
    client = MagicMock()
    client.fetch_report_page.return_value = ReportPage(items=[], total_items=0)

    client_cls = _run_main(
        [
            "--uuid", "other-uuid",
            "--page-size", "25",
            "--max-concurrency", "2",
            "--filter", '{"x": 1}',
            "--sorting", '[{"y": 2}]',
        ],
        _BASE_ENV,
        client,
    )

    assert client_cls.call_args[1]["pool_size"] == 2
    client.fetch_report_page.assert_called_once_with(
        "other-uuid",
        filter={"x": 1},
        pagination={"page": 1, "pageSize": 25},
        sorting=[{"y": 2}],
    )


def test_uuid_flag_satisfies_missing_env():
    client = MagicMock()
    client.fetch_report_page.return_value = ReportPage(items=[], total_items=0)
    env = dict(_BASE_ENV, REPORT_UUID="")
    _run_main(["--uuid", "cli-uuid"], env, client)
    assert client.fetch_report_page.call_args[0][0] == "cli-uuid"


def test_invalid_page_size_flag_exits():
    env = dict(_BASE_ENV)
    with patch.dict(os.environ, env, clear=True), \
         patch("costlocker_report.orchestrator.CostlockerGraphQLClient") as client_cls:
        with pytest.raises(SystemExit) as exc_info:
            run.main(_NO_ENV_FILE + ["--page-size", "0"])
    assert exc_info.value.code == 1
    client_cls.assert_not_called()


def test_fetch_failure_exits_non_zero(capsys):
    client = MagicMock()
    client.fetch_report_page.side_effect = RuntimeError("boom")
    with pytest.raises(SystemExit) as exc_info:
        _run_main([], _BASE_ENV, client)
    assert exc_info.value.code == 1
    captured = capsys.readouterr()
    assert "Fatal error: boom" in captured.err
    assert "=== Report Data ===" not in captured.out


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc_info:
        run.main(["--version"])
    assert exc_info.value.code == 0
    assert capsys.readouterr().out.startswith("costlocker-report ")


def test_unexpected_error_exits_non_zero(capsys):
    with patch("run.ReportOrchestrator", side_effect=RuntimeError("kaboom")):
        with pytest.raises(SystemExit) as exc_info:
            run.cli(_NO_ENV_FILE)
    assert exc_info.value.code == 1
    assert "Unhandled error: kaboom" in capsys.readouterr().err


def test_cli_returns_normally_on_success():
    client = MagicMock()
    client.fetch_report_page.return_value = ReportPage(items=[], total_items=0)
    with patch.dict(os.environ, _BASE_ENV, clear=True), \
         patch("costlocker_report.orchestrator.CostlockerGraphQLClient", return_value=client):
        run.cli(_NO_ENV_FILE)
    client.fetch_report_page.assert_called_once()
