"""
Tests for UpdateService (check/update workflow).
"""

import asyncio

import pytest
from unittest.mock import MagicMock

from lapupdater.config import SettingsStore, get_default_config
from lapupdater.domain.command import CommandResult
from lapupdater.domain.operation import PublishOutcome
from lapupdater.exit_codes import (
    ConnectivityError,
    CopyError,
    PreconditionError,
    WorkflowBusyError,
)
from lapupdater.infra.git_client import GitClient
from lapupdater.services.update_service import UpdateService


@pytest.fixture
def workspace(tmp_path):
    """A source personalbest.ini and an (empty) website repository."""
    source = tmp_path / "game" / "personalbest.ini"
    source.parent.mkdir()
    source.write_text("[Track]\nbest=1:23.456\n", encoding="utf-8")
    repo = tmp_path / "website"
    repo.mkdir()
    return source, repo


@pytest.fixture
def settings(workspace):
    source, repo = workspace
    config = get_default_config()
    config['paths'] = {'source_ini': str(source), 'repo_root': str(repo)}
    return SettingsStore(config, persist=False)


@pytest.fixture
def mock_git_client():
    client = MagicMock(spec=GitClient)
    client.fetch.return_value = CommandResult()
    client.status.return_value = CommandResult(stdout="## main...origin/main\n M data/personalbest.ini")
    client.add_all.return_value = CommandResult()
    client.commit.return_value = CommandResult()
    client.push.return_value = CommandResult()
    return client


def make_service(settings, git_client, online=True):
    return UpdateService(
        settings=settings,
        git_client=git_client,
        log=lambda line: None,
        connectivity_check=lambda url, timeout: online,
    )


class TestPreconditions:
    """Tests for path and connectivity checks."""

    def test_paths_ready(self, settings, mock_git_client):
        service = make_service(settings, mock_git_client)
        assert service.paths_ready()
        assert service.repo_root_ready()

    def test_missing_source_file(self, settings, mock_git_client, tmp_path):
        settings.config['paths']['source_ini'] = str(tmp_path / "missing.ini")
        service = make_service(settings, mock_git_client)

        with pytest.raises(PreconditionError) as exc_info:
            service.ensure_paths()
        assert exc_info.value.title == "Missing file"
        assert exc_info.value.exit_code == 72

    def test_missing_repo_root(self, settings, mock_git_client):
        settings.config['paths']['repo_root'] = ""
        service = make_service(settings, mock_git_client)

        with pytest.raises(PreconditionError) as exc_info:
            service.ensure_paths()
        assert exc_info.value.title == "Missing folder"
        assert not service.paths_ready()

    def test_connectivity_uses_network_config(self, settings, mock_git_client):
        seen = []
        settings.config['network'] = {'check_url': 'http://probe.invalid/204', 'timeout_seconds': 5}
        service = UpdateService(
            settings=settings,
            git_client=mock_git_client,
            log=lambda line: None,
            connectivity_check=lambda url, timeout: seen.append((url, timeout)) or True,
        )

        service.ensure_connectivity()

        assert seen == [('http://probe.invalid/204', 5)]

    def test_offline_raises(self, settings, mock_git_client):
        service = make_service(settings, mock_git_client, online=False)
        with pytest.raises(ConnectivityError, match="No Internet Connection"):
            service.ensure_connectivity()


class TestCopy:
    """Tests for copying the lap-time file."""

    def test_copy_creates_data_dir(self, settings, mock_git_client, workspace):
        source, repo = workspace
        service = make_service(settings, mock_git_client)

        target = service.copy_source_file()

        assert target == repo / "data" / "personalbest.ini"
        assert target.read_text(encoding="utf-8") == source.read_text(encoding="utf-8")

    def test_copy_overwrites(self, settings, mock_git_client, workspace):
        source, repo = workspace
        (repo / "data").mkdir()
        (repo / "data" / "personalbest.ini").write_text("old", encoding="utf-8")

        make_service(settings, mock_git_client).copy_source_file()

        assert (repo / "data" / "personalbest.ini").read_text(encoding="utf-8") == source.read_text(encoding="utf-8")

    def test_copy_failure(self, settings, mock_git_client, workspace):
        _, repo = workspace
        # A file where the data directory should be
        (repo / "data").write_text("not a directory", encoding="utf-8")

        with pytest.raises(CopyError, match="Failed to copy personalbest.ini"):
            make_service(settings, mock_git_client).copy_source_file()


class TestWorkflow:
    """Tests for check_changes / update."""

    def test_check_enables_publish(self, settings, mock_git_client, workspace):
        _, repo = workspace
        service = make_service(settings, mock_git_client)

        state = asyncio.run(service.check_changes())

        assert state.has_uncommitted_changes
        assert service.publish_available
        assert (repo / "data" / "personalbest.ini").exists()
        mock_git_client.status.assert_awaited_once_with(str(repo))

    def test_check_without_changes(self, settings, mock_git_client):
        mock_git_client.status.return_value = CommandResult(stdout="## main...origin/main")
        service = make_service(settings, mock_git_client)

        state = asyncio.run(service.check_changes())

        assert not state.has_changes
        assert not service.publish_available

    def test_check_offline_does_not_copy(self, settings, mock_git_client, workspace):
        _, repo = workspace
        service = make_service(settings, mock_git_client, online=False)

        with pytest.raises(ConnectivityError):
            asyncio.run(service.check_changes())

        assert not (repo / "data").exists()
        mock_git_client.fetch.assert_not_awaited()
        assert not service.busy

    def test_update_requires_check(self, settings, mock_git_client):
        service = make_service(settings, mock_git_client)

        with pytest.raises(PreconditionError, match="Check changes first"):
            asyncio.run(service.update())
        mock_git_client.add_all.assert_not_awaited()

    def test_update_success_persists_and_disables(self, settings, mock_git_client):
        service = make_service(settings, mock_git_client)
        asyncio.run(service.check_changes())

        result = asyncio.run(service.update())

        assert result.success
        assert not service.publish_available
        assert service.last_outcome == PublishOutcome.SUCCESS
        assert settings.config['last_push_status'] == "success"

    def test_update_failure_stays_retryable(self, settings, mock_git_client):
        mock_git_client.push.return_value = CommandResult(stderr="fatal: could not read from remote", exit_code=128)
        service = make_service(settings, mock_git_client)
        asyncio.run(service.check_changes())

        result = asyncio.run(service.update())

        assert not result.success
        assert service.publish_available
        assert service.last_outcome == PublishOutcome.FAILURE

    def test_force_update_skips_check(self, settings, mock_git_client):
        service = make_service(settings, mock_git_client)

        result = asyncio.run(service.update(force=True))

        assert result.success
        mock_git_client.status.assert_not_awaited()

    def test_busy_rejects_second_workflow(self, settings, mock_git_client):
        service = make_service(settings, mock_git_client)
        service.busy = True

        with pytest.raises(WorkflowBusyError):
            asyncio.run(service.check_changes())

    def test_busy_cleared_after_run(self, settings, mock_git_client):
        service = make_service(settings, mock_git_client)
        asyncio.run(service.check_changes())
        assert not service.busy

    def test_concurrent_check_rejected(self, settings, mock_git_client):
        service = make_service(settings, mock_git_client)
        release = None

        async def slow_fetch(path):
            await release.wait()
            return CommandResult()

        mock_git_client.fetch.side_effect = slow_fetch

        async def scenario():
            nonlocal release
            release = asyncio.Event()
            first = asyncio.create_task(service.check_changes(check_network=False))
            await asyncio.sleep(0)
            with pytest.raises(WorkflowBusyError):
                await service.check_changes(check_network=False)
            release.set()
            return await first

        state = asyncio.run(scenario())
        assert state.has_changes
