"""Command line entry point.

Run from the repository root, for example in an Azure Pipelines job:

    phrase-sync --phraseAppSyncDirection pull --config phrase.json

Every setting falls back to the environment variable the pipeline provides
when the flag is omitted.
"""
import argparse
import asyncio
import logging
import os
import sys

import aiohttp

from .api import PhraseAPIClient, PhraseAPIError
from .azure_devops import AzureDevOpsClient, AzureDevOpsError
from .config import ConfigError, SyncConfig, build_config
from .const import DEFAULT_CONFIG_FILE, DIRECTION_PULL, SYNC_DIRECTIONS
from .git_repo import GitPublishError, GitRepository
from .models import SyncResult
from .sync import PhraseSync, SyncError

_LOGGER = logging.getLogger(__name__)

HANDLED_ERRORS = (
    ConfigError,
    SyncError,
    PhraseAPIError,
    AzureDevOpsError,
    GitPublishError,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="phrase-sync",
        description="Push or pull Phrase translations and open a pull request for pulled changes.",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG_FILE, help="Project list (default: phrase.json)"
    )
    parser.add_argument(
        "--sync-direction",
        "--phraseAppSyncDirection",
        dest="sync_direction",
        choices=SYNC_DIRECTIONS,
        help="push the default locale to Phrase or pull all locales from it",
    )
    parser.add_argument("--phrase-token", "--phraseappToken", dest="phrase_token")
    parser.add_argument("--phrase-api-url", dest="phrase_api_url")
    parser.add_argument(
        "--remove-unmentioned-keys",
        "--removeUnmentionedKeys",
        dest="remove_unmentioned_keys",
        help="true to delete keys missing from the pushed file",
    )
    parser.add_argument("--azure-token", "--azureToken", dest="azure_token")
    parser.add_argument("--azure-devops-uri", "--azureDevopsUri", dest="azure_uri")
    parser.add_argument("--azure-project-id", "--azureProjectId", dest="azure_project_id")
    parser.add_argument(
        "--azure-repository-id", "--azureRepositoryId", dest="azure_repository_id"
    )
    parser.add_argument("--git-user-mail", "--gitUserMail", dest="git_user_mail")
    parser.add_argument("--git-user-name", "--gitUserName", dest="git_user_name")
    parser.add_argument("--repo-path", dest="repo_path", help="Working copy (default: .)")
    parser.add_argument("--branch-name", dest="branch_name")
    parser.add_argument("--target-branch", dest="target_branch")
    parser.add_argument(
        "--poll-interval", dest="poll_interval", type=int, help="Milliseconds between upload checks"
    )
    parser.add_argument(
        "--poll-attempts", dest="poll_attempts", type=int, help="Maximum number of upload checks"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def async_run(config: SyncConfig) -> SyncResult:
    """Run one sync with a shared HTTP session."""
    async with aiohttp.ClientSession() as session:
        phrase = PhraseAPIClient(session, config.phrase_token, config.phrase_api_url)
        azure = None
        repository = None
        if config.sync_direction == DIRECTION_PULL:
            azure = AzureDevOpsClient(
                session,
                config.azure_uri,
                config.azure_token,
                config.azure_project_id,
                config.azure_repository_id,
            )
            repository = GitRepository(config.repo_path)

        return await PhraseSync(config, phrase, azure, repository).run()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = build_config(args, os.environ)
        result = asyncio.run(async_run(config))
    except HANDLED_ERRORS as err:
        _LOGGER.error("Phrase sync failed: %s", err)
        return 1

    if result.pull_request_id is not None:
        _LOGGER.info("Opened pull request %s", result.pull_request_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
