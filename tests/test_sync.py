"""Tests for the sync orchestration."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from phrase_sync.api import PhraseAPIClient, PhraseUploadError
from phrase_sync.azure_devops import AzureDevOpsClient
from phrase_sync.git_repo import GitRepository
from phrase_sync.models import Locale, Project
from phrase_sync.sync import PhraseSync, SyncError

LOCALES = [
    Locale(id="loc-en", name="en", code="en-US", default=True),
    Locale(id="loc-de", name="de", code="de-DE"),
]


@pytest.fixture
def phrase():
    client = AsyncMock(spec=PhraseAPIClient)
    client.fetch_locales.return_value = LOCALES
    client.upload_locale.return_value = "U1"
    client.download_locale.side_effect = lambda locale_id, project_id: f'{{"id": "{locale_id}"}}'
    return client


@pytest.fixture
def azure():
    client = AsyncMock(spec=AzureDevOpsClient)
    client.publish_pull_request.return_value = 42
    return client


@pytest.fixture
def repository():
    repo = MagicMock(spec=GitRepository)
    repo.has_changes.return_value = True
    return repo


@pytest.mark.asyncio
async def test_push_uploads_default_locale(make_config, project, phrase):
    project.locale_file("en").write_text("{}", encoding="utf-8")

    result = await PhraseSync(make_config(), phrase).run()

    assert result.upload_id == "U1"
    phrase.fetch_locales.assert_awaited_once_with("P1")
    phrase.upload_locale.assert_awaited_once_with("loc-en", project.locale_path, "en", "P1")
    phrase.remove_unmentioned_keys.assert_not_awaited()
    phrase.download_locale.assert_not_awaited()


@pytest.mark.asyncio
async def test_push_removes_unmentioned_keys(make_config, project, phrase):
    project.locale_file("en").write_text("{}", encoding="utf-8")
    config = make_config(remove_unmentioned_keys=True, poll_interval=5, poll_attempts=7)

    await PhraseSync(config, phrase).run()

    phrase.remove_unmentioned_keys.assert_awaited_once_with("P1", "U1", 5, 7)


@pytest.mark.asyncio
async def test_push_propagates_failed_key_removal(make_config, project, phrase):
    project.locale_file("en").write_text("{}", encoding="utf-8")
    phrase.remove_unmentioned_keys.side_effect = PhraseUploadError("Upload U1 did not succeed")

    with pytest.raises(PhraseUploadError):
        await PhraseSync(make_config(remove_unmentioned_keys=True), phrase).run()


@pytest.mark.asyncio
async def test_push_without_locale_file(make_config, phrase):
    with pytest.raises(SyncError, match="does not exist"):
        await PhraseSync(make_config(), phrase).run()

    phrase.upload_locale.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_default_locale(make_config, phrase):
    phrase.fetch_locales.return_value = [LOCALES[1]]

    with pytest.raises(SyncError, match="DefaultLocale not found for project web"):
        await PhraseSync(make_config(), phrase).run()


@pytest.mark.asyncio
async def test_only_first_project_is_synced(make_config, project, phrase, tmp_path):
    project.locale_file("en").write_text("{}", encoding="utf-8")
    other = Project(
        name="mobile", project_id="P2", locale_path=tmp_path / "other", default_locale="en"
    )

    await PhraseSync(make_config(projects=(project, other)), phrase).run()

    phrase.fetch_locales.assert_awaited_once_with("P1")


@pytest.mark.asyncio
async def test_pull_writes_files_and_opens_pull_request(
    make_config, project, phrase, azure, repository
):
    config = make_config(sync_direction="pull", git_user_name="Bot")

    result = await PhraseSync(config, phrase, azure, repository).run()

    assert result.written_files == [project.locale_file("en"), project.locale_file("de")]
    assert project.locale_file("de").read_text(encoding="utf-8") == '{"id": "loc-de"}'
    repository.configure_user.assert_called_once_with("phrase@devops.com", "Bot")
    repository.push_branch.assert_called_once_with("chore/phrase/update_i18n")
    azure.publish_pull_request.assert_awaited_once_with("chore/phrase/update_i18n", "master")
    assert result.pull_request_id == 42
    phrase.upload_locale.assert_not_awaited()


@pytest.mark.asyncio
async def test_pull_creates_missing_locale_directory(make_config, phrase, azure, repository, tmp_path):
    project = Project(
        name="web", project_id="P1", locale_path=tmp_path / "new" / "i18n", default_locale="en"
    )
    config = make_config(sync_direction="pull", projects=(project,))

    await PhraseSync(config, phrase, azure, repository).run()

    assert project.locale_file("en").is_file()


@pytest.mark.asyncio
async def test_pull_without_changes_skips_publishing(make_config, phrase, azure, repository):
    repository.has_changes.return_value = False

    result = await PhraseSync(make_config(sync_direction="pull"), phrase, azure, repository).run()

    assert result.pull_request_id is None
    repository.push_branch.assert_not_called()
    azure.publish_pull_request.assert_not_awaited()


@pytest.mark.asyncio
async def test_pull_requires_publishers(make_config, phrase):
    with pytest.raises(SyncError):
        await PhraseSync(make_config(sync_direction="pull"), phrase).run()
