"""Tests for the command-line interface."""

import json
from unittest.mock import Mock, patch

import pytest
from typer.testing import CliRunner

from alertext.cli.main import app
from alertext.config import get_settings
from alertext.core.errors import TelephoneAuthError
from alertext.core.notify.models import NotifyResult

runner = CliRunner()


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestEsConvert:
    """Tests for `alertext es convert`."""

    def test_converts_webhook_payload(self, tmp_path):
        """Should print one document per alert."""
        path = write_json(
            tmp_path / "payload.json",
            {
                "alerts": [
                    {"labels": {"alertname": "A", "severity": "warn", "group": "g", "value": "1.5"}},
                    {"labels": {"alertname": "B", "severity": "crit", "group": "g", "value": "-2"}},
                ]
            },
        )
        result = runner.invoke(app, ["es", "convert", str(path)])

        assert result.exit_code == 0, result.output
        documents = json.loads(result.stdout)
        assert [d["labels"]["value"] for d in documents] == [1.5, -2.0]
        assert documents[0]["labels"]["alertname"] == "A"

    def test_converts_single_alert(self, tmp_path):
        """A file holding one alert object is accepted."""
        path = write_json(
            tmp_path / "alert.json",
            {"labels": {"severity": "warn", "group": "g", "value": "3"}, "generatorURL": "http://x"},
        )
        result = runner.invoke(app, ["es", "convert", str(path)])

        assert result.exit_code == 0, result.output
        documents = json.loads(result.stdout)
        assert documents[0]["generatorURL"] == "http://x"

    def test_reports_missing_label(self, tmp_path):
        """Validation errors exit with status 1."""
        path = write_json(tmp_path / "alerts.json", [{"labels": {"value": "1", "group": "g"}}])
        result = runner.invoke(app, ["es", "convert", str(path)])

        assert result.exit_code == 1
        assert "severity" in result.output

    def test_no_validate_flag(self, tmp_path):
        """--no-validate skips the required-label check."""
        path = write_json(tmp_path / "alerts.json", [{"labels": {"value": "1"}}])
        result = runner.invoke(app, ["es", "convert", "--no-validate", str(path)])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)[0]["labels"] == {"value": 1.0}

    def test_reports_invalid_json(self, tmp_path):
        """Unreadable files exit with status 1."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        result = runner.invoke(app, ["es", "convert", str(path)])

        assert result.exit_code == 1

    def test_reports_non_utf8_file(self, tmp_path):
        """A file that is not UTF-8 is reported instead of crashing."""
        path = tmp_path / "latin1.json"
        path.write_bytes(b"\xff\xfe\x00bad")
        result = runner.invoke(app, ["es", "convert", str(path)])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Error" in result.output


class TestTelephoneCommands:
    """Tests for `alertext telephone`."""

    def test_status_masks_secrets(self, monkeypatch):
        """Secrets are never printed in full."""
        monkeypatch.setenv("TELEPHONE_APP_SECRET", "super-secret-value")
        result = runner.invoke(app, ["telephone", "status"])

        assert result.exit_code == 0, result.output
        assert "super-secret-value" not in result.output
        assert "Telephone Channel" in result.output

    def test_send_test_reports_outcome(self):
        """Per-operator outcome is shown and failures exit with 1."""
        notifier = Mock()
        notifier.notify.return_value = NotifyResult(
            succeeded=["13800000001"], failed={"13800000002": "connection reset"}
        )
        with patch("alertext.cli.telephone.build_telephone_notifier", return_value=notifier):
            result = runner.invoke(app, ["telephone", "test"])

        assert result.exit_code == 1
        assert "13800000001" in result.output
        assert "connection reset" in result.output
        notifier.notify.assert_called_once()

    def test_send_test_announces_alert_name(self):
        """The test alert is announced by its alertname."""
        notifier = Mock()
        notifier.notify.return_value = NotifyResult(succeeded=["13800000001"])
        with patch("alertext.cli.telephone.build_telephone_notifier", return_value=notifier):
            result = runner.invoke(app, ["telephone", "test"])

        assert result.exit_code == 0, result.output
        assert "Sending test alert AlertextTest" in result.output
        (event,), _ = notifier.notify.call_args
        assert event.alerts[0].name == "AlertextTest"

    def test_send_test_to_explicit_number(self):
        """--to overrides the configured operators."""
        notifier = Mock()
        notifier.notify.return_value = NotifyResult(succeeded=["+14155550100"])
        with patch("alertext.cli.telephone.build_telephone_notifier", return_value=notifier):
            result = runner.invoke(app, ["telephone", "test", "--to", "+14155550100"])

        assert result.exit_code == 0, result.output
        _, kwargs = notifier.notify.call_args
        assert kwargs["destinations"] == ["+14155550100"]

    def test_send_test_login_failure(self):
        """A failed login exits with status 1."""
        with patch(
            "alertext.cli.telephone.build_telephone_notifier",
            side_effect=TelephoneAuthError("the response status code is 401, and body is denied"),
        ):
            result = runner.invoke(app, ["telephone", "test"])

        assert result.exit_code == 1
        assert "401" in result.output


def test_version():
    """version prints the product name."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "alertext" in result.output
