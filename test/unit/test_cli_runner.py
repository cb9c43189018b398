from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from appspider.enterprise.cli import runner
from appspider.enterprise.interfaces import ClientIdNamePair, ScanResult

BASE_ARGS = ["--url", "appspider.example.com", "--username", "u", "--password", "p"]


@pytest.fixture
def fake_client(monkeypatch):
    client = MagicMock()
    client.__enter__.return_value = client
    client.__exit__.return_value = False
    client.get_url.return_value = "https://appspider.example.com/AppSpiderEnterprise/rest/v1"
    client.login.return_value = "tok"
    created = []

    def factory(config):
        created.append(config)
        return client

    monkeypatch.setattr(runner, "EnterpriseRestClient", factory)
    client.created = created
    return client


def invoke(*args):
    return CliRunner().invoke(runner.cli, [*BASE_ARGS, *args])


def test_test_auth_success(fake_client):
    result = invoke("test-auth")

    assert result.exit_code == 0, result.output
    assert "Authenticated" in result.output
    assert fake_client.created[0].url == "https://appspider.example.com/AppSpiderEnterprise/rest/v1"
    fake_client.__exit__.assert_called_once()


def test_test_auth_failure(fake_client):
    fake_client.login.return_value = None

    result = invoke("test-auth")

    assert result.exit_code == 1
    assert "Authentication failed" in result.output


def test_missing_credentials(fake_client, monkeypatch):
    for key in ("APPSPIDER_USERNAME", "APPSPIDER_PASSWORD"):
        monkeypatch.delenv(key, raising=False)

    result = CliRunner().invoke(runner.cli, ["--url", "h", "configs"])

    assert result.exit_code == 1
    assert "Username and password are required" in result.output
    assert fake_client.created == []


def test_list_commands(fake_client):
    fake_client.get_config_names.return_value = ["nightly", "weekly"]
    fake_client.get_engine_group_names_for_client.return_value = ["Default"]
    fake_client.get_client_name_id_pairs.return_value = [ClientIdNamePair("c-1", "Alpha")]

    configs = invoke("configs")
    groups = invoke("engine-groups")
    clients = invoke("clients")

    assert configs.exit_code == 0 and "nightly" in configs.output and "weekly" in configs.output
    assert groups.exit_code == 0 and "Default" in groups.output
    assert clients.exit_code == 0 and "Alpha" in clients.output and "c-1" in clients.output


def test_list_failure(fake_client):
    fake_client.get_config_names.return_value = None

    result = invoke("configs")

    assert result.exit_code == 1


def test_save_config_resolves_engine_group(fake_client):
    fake_client.get_engine_group_id_from_name.return_value = "eg-1"
    fake_client.save_config.return_value = True

    result = invoke("save-config", "--name", "nightly", "--target-url", "https://t.example.com", "--engine-group", "Default")

    assert result.exit_code == 0, result.output
    fake_client.save_config.assert_called_once_with("tok", "nightly", "https://t.example.com", "eg-1")


def test_save_config_unknown_engine_group(fake_client):
    fake_client.get_engine_group_id_from_name.return_value = None

    result = invoke("save-config", "--name", "n", "--target-url", "https://t.example.com", "--engine-group", "Nope")

    assert result.exit_code == 1
    assert "Engine group not found" in result.output
    fake_client.save_config.assert_not_called()


def test_run_without_wait(fake_client):
    fake_client.run_scan_by_config_name.return_value = ScanResult.succeeded("scan-9")

    result = invoke("run", "--config-name", "nightly")

    assert result.exit_code == 0, result.output
    assert "scan-9" in result.output
    fake_client.is_scan_finished.assert_not_called()


def test_run_failure(fake_client):
    fake_client.run_scan_by_config_name.return_value = ScanResult.failed()

    result = invoke("run", "--config-name", "nightly")

    assert result.exit_code == 1
    assert "Failed to start scan" in result.output


def test_run_rejects_zero_poll_interval(fake_client):
    result = invoke("run", "--config-name", "nightly", "--wait", "--poll-interval", "0")

    assert result.exit_code == 2
    assert "--poll-interval" in result.output
    fake_client.run_scan_by_config_name.assert_not_called()


def test_run_wait_and_download(fake_client, tmp_path, monkeypatch):
    fake_client.run_scan_by_config_name.return_value = ScanResult.succeeded("scan-9")
    fake_client.get_scan_status.return_value = "Completed"
    fake_client.is_scan_finished.return_value = True
    downloads = []

    class FakeDownloader:
        def __init__(self, client, output_dir):
            self.output_dir = output_dir

        def download_all(self, token, scan_id):
            downloads.append((token, scan_id))
            return [self.output_dir / f"{scan_id}_Report.zip"]

    monkeypatch.setattr(runner, "ReportDownloader", FakeDownloader)

    result = invoke("run", "--config-name", "nightly", "--wait", "-o", str(tmp_path))

    assert result.exit_code == 0, result.output
    assert "Completed" in result.output
    assert downloads == [("tok", "scan-9")]


def test_status(fake_client):
    fake_client.get_scan_status.return_value = "Running"
    fake_client.is_scan_finished.return_value = False

    result = invoke("status", "--scan-id", "scan-9")

    assert result.exit_code == 0, result.output
    assert "Running" in result.output
    fake_client.has_report.assert_not_called()


def test_report_without_report(fake_client, tmp_path):
    fake_client.has_report.return_value = False

    result = invoke("report", "--scan-id", "scan-9", "-o", str(tmp_path))

    assert result.exit_code == 1
    assert "No report available" in result.output
