"""Sequence one push or pull between Phrase and the repository."""
import asyncio
import logging
from pathlib import Path

from .api import PhraseAPIClient
from .azure_devops import AzureDevOpsClient
from .config import SyncConfig
from .const import DIRECTION_PULL, DIRECTION_PUSH
from .git_repo import GitRepository
from .models import Locale, Project, SyncResult

_LOGGER = logging.getLogger(__name__)


class SyncError(Exception):
    """Exception for a sync run that cannot proceed."""


class PhraseSync:
    """Class to run a single sync for the first configured project."""

    def __init__(
        self,
        config: SyncConfig,
        phrase: PhraseAPIClient,
        azure: AzureDevOpsClient | None = None,
        repository: GitRepository | None = None,
    ) -> None:
        """Initialize the sync run."""
        self.config = config
        self.phrase = phrase
        self.azure = azure
        self.repository = repository

    async def run(self) -> SyncResult:
        """Push or pull translations, then publish pulled changes."""
        projects = self.config.projects
        _LOGGER.info("Found %d projects", len(projects))
        if len(projects) > 1:
            _LOGGER.debug(
                "Only the first project is synced, ignoring: %s",
                [project.name for project in projects[1:]],
            )

        project = projects[0]
        direction = self.config.sync_direction
        result = SyncResult(direction=direction, project=project.name)

        locales = await self.phrase.fetch_locales(project.project_id)
        default_locale = self._find_default_locale(project, locales)

        if direction == DIRECTION_PUSH:
            _LOGGER.info("Push translation updates for project: %s", project.name)
            result.upload_id = await self._upload_default_locale(project, default_locale)
        elif direction == DIRECTION_PULL:
            _LOGGER.info("Pull translation updates for project: %s", project.name)
            result.written_files = await self._download_locales(project, locales)
            result.pull_request_id = await self._publish_changes()

        return result

    @staticmethod
    def _find_default_locale(project: Project, locales: list[Locale]) -> Locale:
        for locale in locales:
            if locale.name == project.default_locale:
                return locale
        raise SyncError(
            f"DefaultLocale not found for project {project.name}. List of locales "
            f"fetched from Phrase didn't contain locale with name {project.default_locale}"
        )

    async def _upload_default_locale(self, project: Project, locale: Locale) -> str:
        source_file = project.locale_file(project.default_locale)
        if not source_file.is_file():
            raise SyncError(f"Default locale file {source_file} does not exist")

        upload_id = await self.phrase.upload_locale(
            locale.id, project.locale_path, project.default_locale, project.project_id
        )
        _LOGGER.info("Initiated upload. UploadId: %s", upload_id)

        if self.config.remove_unmentioned_keys:
            await self.phrase.remove_unmentioned_keys(
                project.project_id,
                upload_id,
                self.config.poll_interval,
                self.config.poll_attempts,
            )

        return upload_id

    async def _download_locales(
        self, project: Project, locales: list[Locale]
    ) -> list[Path]:
        written = []
        project.locale_path.mkdir(parents=True, exist_ok=True)
        for locale in locales:
            content = await self.phrase.download_locale(locale.id, project.project_id)
            path = project.locale_file(locale.name)
            path.write_text(content, encoding="utf-8")
            _LOGGER.debug("Wrote %s", path)
            written.append(path)

        _LOGGER.info("Downloaded %d locales for project %s", len(written), project.name)
        return written

    async def _publish_changes(self) -> int | None:
        """Push a branch and open a pull request when pulled files changed anything."""
        if self.repository is None or self.azure is None:
            raise SyncError("Pulling requires a git repository and an Azure DevOps client")

        if not await asyncio.to_thread(self.repository.has_changes):
            _LOGGER.info("Translations are up to date, nothing to publish")
            return None

        await asyncio.to_thread(self._push_branch)
        return await self.azure.publish_pull_request(
            self.config.branch_name, self.config.target_branch
        )

    def _push_branch(self) -> None:
        self.repository.configure_user(self.config.git_user_mail, self.config.git_user_name)
        self.repository.push_branch(self.config.branch_name)
