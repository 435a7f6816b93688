"""Tests for the CLI entry point."""

import json
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from covmon_cli.cli import _build_store, main
from covmon_core.errors import CollaboratorError, ConfigError
from covmon_core.evaluator import evaluate
from covmon_core.metrics import CategoryMetric, Metric
from covmon_core.monitor import MonitorSummary
from covmon_core.render import render_comment
from covmon_core.status import build_status
from covmon_store.gist import GistStore
from covmon_store.local import LocalStore

SHA = "a" * 40
REPORT = (
    "<coverage><project><metrics "
    'elements="100" coveredelements="90" statements="100" coveredstatements="95" '
    'methods="20" coveredmethods="18" conditionals="50" coveredconditionals="40"'
    "/></project></coverage>"
)


def _make_config(github_token="tok", **overrides):
    config = {
        "github_token": github_token,
        "comment": True,
        "check": True,
        "clover_file": "coverage/clover.xml",
        "original_clover_file": "coverage/base.xml",
        "threshold_alert": 90,
        "threshold_warning": 50,
        "status_context": "Coverage Report",
        "comment_context": "Coverage Report",
        "comment_mode": "replace",
        "baseline_store": "local",
        "gist_id": None,
    }
    config.update(overrides)
    return config


def _patch_common(mocker, config=None, token="tok"):
    """Patch load_config, resolve_github_token, and _build_store for most tests."""
    cfg = config or _make_config()
    mocker.patch("covmon_core.config.load_config", return_value=cfg)
    mocker.patch("covmon_core.config.resolve_github_token", return_value=token)
    mock_store = MagicMock(spec=LocalStore)
    mock_store.key_for.side_effect = lambda filename: filename
    mocker.patch("covmon_cli.cli._build_store", return_value=mock_store)
    return cfg, mock_store


def _event_file(tmp_path, payload=None):
    if payload is None:
        payload = {
            "pull_request": {"number": 7, "html_url": "https://github.com/owner/repo/pull/7", "head": {"sha": SHA}},
            "repository": {"full_name": "owner/repo"},
        }
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload))
    return str(path)


def _metric(branches_covered=40):
    return Metric(
        statements=CategoryMetric(total=100, covered=90),
        lines=CategoryMetric(total=100, covered=95),
        methods=CategoryMetric(total=20, covered=18),
        branches=CategoryMetric(total=50, covered=branches_covered),
    )


def _summary(baseline=None):
    metric = _metric()
    result = evaluate(metric, baseline)
    return MonitorSummary(
        repo="owner/repo",
        pr_number=7,
        head_sha=SHA,
        metric=metric,
        baseline=baseline,
        result=result,
        status=build_status(result, "https://github.com/owner/repo/pull/7", "Coverage Report"),
        body=render_comment(metric, "Coverage Report"),
    )


# ---------------------------------------------------------------------------
# run command
# ---------------------------------------------------------------------------


class TestRunCommand:
    def test_calls_run_monitor_with_event_and_store(self, mocker, tmp_path, monkeypatch):
        monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
        cfg, store = _patch_common(mocker)
        mock_run = mocker.patch("covmon_cli.commands.run.run_monitor", return_value=_summary())

        result = CliRunner().invoke(main, ["run", "--event", _event_file(tmp_path)])

        assert result.exit_code == 0, result.output
        kwargs = mock_run.call_args.kwargs
        assert kwargs["repo"] == "owner/repo"
        assert kwargs["event"].number == 7
        assert kwargs["baseline_source"] is store
        assert kwargs["baseline_name"] == "coverage/base.xml"
        assert kwargs["shadow"] is False
        store.close.assert_called_once()
        assert "No baseline report" in result.output

    def test_regression_exits_nonzero(self, mocker, tmp_path):
        _patch_common(mocker)
        mocker.patch("covmon_cli.commands.run.run_monitor", return_value=_summary(baseline=_metric(45)))

        result = CliRunner().invoke(main, ["run", "--event", _event_file(tmp_path)])

        assert result.exit_code == 1
        assert "Branches decrease" in result.output

    def test_collaborator_error_reported(self, mocker, tmp_path):
        _patch_common(mocker)
        mocker.patch("covmon_cli.commands.run.run_monitor", side_effect=CollaboratorError("GitHub API call failed"))

        result = CliRunner().invoke(main, ["run", "--event", _event_file(tmp_path)])

        assert result.exit_code == 1
        assert "GitHub API call failed" in result.output

    def test_shadow_flag_passed_through(self, mocker, tmp_path):
        _patch_common(mocker)
        mock_run = mocker.patch("covmon_cli.commands.run.run_monitor", return_value=_summary())

        CliRunner().invoke(main, ["run", "--event", _event_file(tmp_path), "--shadow"])

        assert mock_run.call_args.kwargs["shadow"] is True

    def test_shadow_needs_no_token(self, mocker, tmp_path):
        _patch_common(mocker, config=_make_config(github_token=None), token=None)
        mocker.patch("covmon_cli.commands.run.run_monitor", return_value=_summary())

        result = CliRunner().invoke(main, ["run", "--event", _event_file(tmp_path), "--shadow"])

        assert result.exit_code == 0, result.output

    def test_missing_github_token(self, mocker, tmp_path):
        _patch_common(mocker, config=_make_config(github_token=None), token=None)
        mock_run = mocker.patch("covmon_cli.commands.run.run_monitor")

        result = CliRunner().invoke(main, ["run", "--event", _event_file(tmp_path)])

        assert result.exit_code != 0
        assert "GITHUB_TOKEN" in result.output
        mock_run.assert_not_called()

    def test_missing_required_config(self, mocker, tmp_path):
        _patch_common(mocker, config=_make_config(clover_file=None))
        mock_run = mocker.patch("covmon_cli.commands.run.run_monitor")

        result = CliRunner().invoke(main, ["run", "--event", _event_file(tmp_path)])

        assert result.exit_code == 1
        assert "clover_file" in result.output
        mock_run.assert_not_called()

    def test_non_pull_request_event(self, mocker, tmp_path):
        _patch_common(mocker)
        mock_run = mocker.patch("covmon_cli.commands.run.run_monitor")

        result = CliRunner().invoke(main, ["run", "--event", _event_file(tmp_path, {"ref": "refs/heads/main"})])

        assert result.exit_code == 1
        assert "pull_request" in result.output
        mock_run.assert_not_called()

    def test_invalid_config_file_exits_one(self, mocker, tmp_path):
        mocker.patch("covmon_core.config.load_config", side_effect=ConfigError("threshold_alert must be an integer"))
        mocker.patch("covmon_core.config.resolve_github_token", return_value="tok")

        result = CliRunner().invoke(main, ["run", "--event", _event_file(tmp_path)])

        assert result.exit_code == 1
        assert "threshold_alert" in result.output

    def test_repo_option_overrides_event(self, mocker, tmp_path):
        _patch_common(mocker)
        mock_run = mocker.patch("covmon_cli.commands.run.run_monitor", return_value=_summary())

        CliRunner().invoke(main, ["run", "--event", _event_file(tmp_path), "--repo", "fork/repo"])

        assert mock_run.call_args.kwargs["repo"] == "fork/repo"


# ---------------------------------------------------------------------------
# show command
# ---------------------------------------------------------------------------


class TestShowCommand:
    def test_prints_metrics(self, mocker, tmp_path):
        _patch_common(mocker)
        report = tmp_path / "clover.xml"
        report.write_text(REPORT)

        result = CliRunner().invoke(main, ["show", str(report)])

        assert result.exit_code == 0, result.output
        assert "Statements" in result.output
        assert "88.75%" in result.output
        assert "Success" in result.output

    def test_markdown_flag_prints_comment(self, mocker, tmp_path):
        _patch_common(mocker)
        report = tmp_path / "clover.xml"
        report.write_text(REPORT)

        result = CliRunner().invoke(main, ["show", str(report), "--markdown"])

        assert "<!-- coverage: Coverage Report -->" in result.output

    def test_compares_with_baseline(self, mocker, tmp_path):
        _patch_common(mocker)
        report = tmp_path / "clover.xml"
        report.write_text(REPORT)
        baseline = tmp_path / "base.xml"
        baseline.write_text(REPORT.replace('coveredconditionals="40"', 'coveredconditionals="45"'))

        result = CliRunner().invoke(main, ["show", str(report), "--baseline", str(baseline)])

        assert "Branches decrease - 10.00%" in result.output

    def test_missing_baseline_noted(self, mocker, tmp_path):
        _patch_common(mocker)
        report = tmp_path / "clover.xml"
        report.write_text(REPORT)

        result = CliRunner().invoke(main, ["show", str(report), "--baseline", str(tmp_path / "none.xml")])

        assert result.exit_code == 0
        assert "unavailable" in result.output

    def test_malformed_report(self, mocker, tmp_path):
        _patch_common(mocker)
        report = tmp_path / "clover.xml"
        report.write_text("<coverage/>")

        result = CliRunner().invoke(main, ["show", str(report)])

        assert result.exit_code == 1
        assert "<project>" in result.output


# ---------------------------------------------------------------------------
# baseline upload command
# ---------------------------------------------------------------------------


class TestBaselineUpload:
    def test_stores_report_under_configured_name(self, mocker, tmp_path):
        _patch_common(mocker)
        store = LocalStore(root=str(tmp_path / "store"))
        mocker.patch("covmon_cli.cli._build_store", return_value=store)
        report = tmp_path / "clover.xml"
        report.write_text(REPORT)

        result = CliRunner().invoke(main, ["baseline", "upload", str(report)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "store" / "coverage" / "base.xml").read_text() == REPORT

    def test_refuses_malformed_report(self, mocker, tmp_path):
        _, store = _patch_common(mocker)
        report = tmp_path / "clover.xml"
        report.write_text("<coverage/>")

        result = CliRunner().invoke(main, ["baseline", "upload", str(report)])

        assert result.exit_code == 1
        assert "malformed" in result.output
        store.save.assert_not_called()

    def test_requires_original_clover_file(self, mocker, tmp_path):
        _patch_common(mocker, config=_make_config(original_clover_file=None))
        report = tmp_path / "clover.xml"
        report.write_text(REPORT)

        result = CliRunner().invoke(main, ["baseline", "upload", str(report)])

        assert result.exit_code != 0
        assert "original_clover_file" in result.output


# ---------------------------------------------------------------------------
# _build_store
# ---------------------------------------------------------------------------


class TestBuildStore:
    def test_returns_local_by_default(self):
        assert isinstance(_build_store({}), LocalStore)

    def test_returns_gist_store_when_configured(self):
        with patch("github.Github"):  # Github is a local import inside GistStore.__init__
            store = _build_store({"baseline_store": "gist", "gist_id": "abc123", "github_token": "tok"})
        assert isinstance(store, GistStore)

    def test_gist_without_id_is_usage_error(self):
        import click
        import pytest

        with pytest.raises(click.UsageError, match="gist_id"):
            _build_store({"baseline_store": "gist", "github_token": "tok"})
