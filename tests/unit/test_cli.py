"""Tests for the aznic command-line interface.

Authentication and client construction are patched; the commands run
against the mock management clients.
"""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from aznic import __version__
from aznic.cli import main
from aznic.exceptions import AuthenticationError
from tests.mocks.azure_mock import create_mock_azure_environment


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def patched_azure():
    """Patch credential and client creation; yield (factory, build_clients, recorder)."""
    clients, recorder = create_mock_azure_environment()
    with (
        patch("aznic.cli.CredentialFactory") as mock_factory,
        patch("aznic.cli.build_clients", return_value=clients) as mock_build,
    ):
        yield mock_factory, mock_build, recorder


class TestMainGroup:
    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("run", "list-nics", "cleanup"):
            assert command in result.output


class TestStartupChecks:
    """Missing environment or bad credentials stop before any remote call."""

    def test_missing_env(self, runner, patched_azure):
        mock_factory, mock_build, recorder = patched_azure

        result = runner.invoke(main, ["run", "--yes"])

        assert result.exit_code == 1
        assert "AZURE_CLIENT_SECRET" in result.output
        mock_factory.authenticate.assert_not_called()
        mock_build.assert_not_called()
        assert recorder.calls == []

    def test_authentication_failure(self, runner, azure_env, patched_azure):
        mock_factory, mock_build, recorder = patched_azure
        mock_factory.authenticate.side_effect = AuthenticationError(
            "Authentication failed", "AADSTS7000215"
        )

        result = runner.invoke(main, ["run", "--yes"])

        assert result.exit_code == 1
        assert "Authentication failed" in result.output
        mock_build.assert_not_called()
        assert recorder.calls == []

    def test_missing_config_file(self, runner, azure_env, patched_azure, tmp_path):
        result = runner.invoke(main, ["run", "--yes", "--config", str(tmp_path / "none.toml")])

        assert result.exit_code == 1
        assert "Config file not found" in result.output
        patched_azure[0].authenticate.assert_not_called()

    def test_address_space_too_small(self, runner, azure_env, patched_azure, tmp_path):
        path = tmp_path / "small.toml"
        path.write_text('[sample]\naddress_space = "172.16.0.0/23"\n')

        result = runner.invoke(main, ["run", "--yes", "--config", str(path)])

        assert result.exit_code == 1
        assert "has room for 1 /24" in result.output
        assert patched_azure[2].calls == []


class TestRunCommand:
    def test_unattended_run(self, runner, azure_env, patched_azure):
        _, _, recorder = patched_azure

        result = runner.invoke(main, ["run", "--yes"])

        assert result.exit_code == 0, result.output
        assert "(skipped, --yes)" in result.output
        assert recorder.operations()[-1] == "resource_groups.begin_delete:done"

    def test_interactive_run_waits_for_enter(self, runner, azure_env, patched_azure):
        _, _, recorder = patched_azure

        result = runner.invoke(main, ["run"], input="\n\n")

        assert result.exit_code == 0, result.output
        assert "Press enter to delete NIC 'nic2'..." in result.output
        assert "resource_groups.begin_delete" in recorder.operations()

    def test_overrides(self, runner, azure_env, patched_azure):
        _, _, recorder = patched_azure

        result = runner.invoke(main, ["run", "--yes", "--rg", "other-rg", "--region", "eastus"])

        assert result.exit_code == 0, result.output
        assert recorder.calls[0] == ("resource_groups.create_or_update", "other-rg")

    def test_failure_exit_code_and_cleanup(self, runner, azure_env, patched_azure):
        _, _, recorder = patched_azure
        recorder.fail_on("virtual_networks.begin_create_or_update")

        result = runner.invoke(main, ["run", "--yes"])

        assert result.exit_code == 1
        assert "Create virtual network 'vNet' failed" in result.output
        assert recorder.operations()[-1] == "resource_groups.begin_delete"

    def test_no_cleanup_on_failure_flag(self, runner, azure_env, patched_azure):
        _, _, recorder = patched_azure
        recorder.fail_on("virtual_networks.begin_create_or_update")

        result = runner.invoke(main, ["run", "--yes", "--no-cleanup-on-failure"])

        assert result.exit_code == 1
        assert "resource_groups.begin_delete" not in recorder.operations()

    def test_config_file(self, runner, azure_env, patched_azure, tmp_path):
        _, _, recorder = patched_azure
        path = tmp_path / "aznic.toml"
        path.write_text('[sample]\nresource_group = "from-file"\n')

        result = runner.invoke(main, ["run", "--yes", "--config", str(path)])

        assert result.exit_code == 0, result.output
        assert recorder.calls[0] == ("resource_groups.create_or_update", "from-file")


class TestListNicsCommand:
    def test_empty_group(self, runner, azure_env, patched_azure):
        result = runner.invoke(main, ["list-nics"])

        assert result.exit_code == 0
        assert "There are no NICs in aznic-sample-group resource group" in result.output

    def test_list_failure(self, runner, azure_env, patched_azure):
        patched_azure[2].fail_on("network_interfaces.list")

        result = runner.invoke(main, ["list-nics"])

        assert result.exit_code == 1
        assert "List NICs" in result.output


class TestCleanupCommand:
    def test_declined_confirmation(self, runner, azure_env, patched_azure):
        mock_factory, _, recorder = patched_azure

        result = runner.invoke(main, ["cleanup"], input="n\n")

        assert result.exit_code == 1
        mock_factory.authenticate.assert_not_called()
        assert recorder.calls == []

    def test_confirmed(self, runner, azure_env, patched_azure):
        _, _, recorder = patched_azure

        result = runner.invoke(main, ["cleanup"], input="y\n")

        assert result.exit_code == 0
        assert recorder.operations() == [
            "resource_groups.begin_delete",
            "resource_groups.begin_delete:done",
        ]

    def test_yes_flag(self, runner, azure_env, patched_azure):
        result = runner.invoke(main, ["cleanup", "--yes", "--rg", "other-rg"])

        assert result.exit_code == 0
        assert patched_azure[2].calls[0] == ("resource_groups.begin_delete", "other-rg")
