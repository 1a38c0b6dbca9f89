"""Configuration for the Phrase sync tool."""
from argparse import Namespace
from collections.abc import Mapping
from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any

import voluptuous as vol

from .const import (
    CONF_DEFAULT_LOCALE,
    CONF_LOCALE_PATH,
    CONF_NAME,
    CONF_PROJECT_ID,
    CONF_PROJECTS,
    DEFAULT_BRANCH_NAME,
    DEFAULT_CONFIG_FILE,
    DEFAULT_GIT_USER_MAIL,
    DEFAULT_GIT_USER_NAME,
    DEFAULT_POLL_ATTEMPTS,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TARGET_BRANCH,
    DIRECTION_PULL,
    ENV_AZURE_PROJECT_ID,
    ENV_AZURE_REPOSITORY_ID,
    ENV_AZURE_TOKEN,
    ENV_AZURE_URI,
    ENV_GIT_USER_MAIL,
    ENV_GIT_USER_NAME,
    ENV_PHRASE_TOKEN,
    ENV_REMOVE_UNMENTIONED_KEYS,
    ENV_SYNC_DIRECTION,
    PHRASE_API_BASE_URL,
    SYNC_DIRECTIONS,
)
from .models import Project

_LOGGER = logging.getLogger(__name__)


class ConfigError(Exception):
    """Exception for missing or invalid configuration."""


_NON_EMPTY = vol.All(str, vol.Length(min=1))

PROJECT_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_NAME): _NON_EMPTY,
        vol.Required(CONF_PROJECT_ID): _NON_EMPTY,
        vol.Required(CONF_LOCALE_PATH): _NON_EMPTY,
        vol.Required(CONF_DEFAULT_LOCALE): _NON_EMPTY,
    },
    extra=vol.ALLOW_EXTRA,
)

PROJECTS_FILE_SCHEMA = vol.Schema(
    {vol.Required(CONF_PROJECTS): vol.All([PROJECT_SCHEMA], vol.Length(min=1))},
    extra=vol.ALLOW_EXTRA,
)

# argument name -> environment variable consulted when the flag is not given
ENV_FALLBACKS = {
    "phrase_token": ENV_PHRASE_TOKEN,
    "azure_token": ENV_AZURE_TOKEN,
    "azure_uri": ENV_AZURE_URI,
    "azure_project_id": ENV_AZURE_PROJECT_ID,
    "azure_repository_id": ENV_AZURE_REPOSITORY_ID,
    "sync_direction": ENV_SYNC_DIRECTION,
    "remove_unmentioned_keys": ENV_REMOVE_UNMENTIONED_KEYS,
    "git_user_mail": ENV_GIT_USER_MAIL,
    "git_user_name": ENV_GIT_USER_NAME,
}

AZURE_SETTINGS = ("azure_token", "azure_uri", "azure_project_id", "azure_repository_id")


def _require_azure_for_pull(settings: dict[str, Any]) -> dict[str, Any]:
    """Pulling opens a pull request, so the Azure DevOps settings are mandatory."""
    if settings["sync_direction"] == DIRECTION_PULL:
        missing = [key for key in AZURE_SETTINGS if not settings.get(key)]
        if missing:
            raise vol.Invalid(
                f"missing Azure DevOps settings for pull: {', '.join(missing)}"
            )
    return settings


SETTINGS_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Required("phrase_token"): _NON_EMPTY,
            vol.Optional("phrase_api_url", default=PHRASE_API_BASE_URL): vol.Url(),
            vol.Required("sync_direction"): vol.All(
                str, vol.Lower, vol.In(SYNC_DIRECTIONS)
            ),
            vol.Optional("remove_unmentioned_keys", default=False): vol.Boolean(),
            vol.Optional("azure_token", default=None): vol.Any(None, str),
            vol.Optional("azure_uri", default=None): vol.Any(None, str),
            vol.Optional("azure_project_id", default=None): vol.Any(None, str),
            vol.Optional("azure_repository_id", default=None): vol.Any(None, str),
            vol.Optional("git_user_mail", default=DEFAULT_GIT_USER_MAIL): _NON_EMPTY,
            vol.Optional("git_user_name", default=DEFAULT_GIT_USER_NAME): _NON_EMPTY,
            vol.Optional("branch_name", default=DEFAULT_BRANCH_NAME): _NON_EMPTY,
            vol.Optional("target_branch", default=DEFAULT_TARGET_BRANCH): _NON_EMPTY,
            vol.Optional("poll_interval", default=DEFAULT_POLL_INTERVAL): vol.All(
                vol.Coerce(int), vol.Range(min=1)
            ),
            vol.Optional("poll_attempts", default=DEFAULT_POLL_ATTEMPTS): vol.All(
                vol.Coerce(int), vol.Range(min=1)
            ),
        },
        extra=vol.REMOVE_EXTRA,
    ),
    _require_azure_for_pull,
)


@dataclass(frozen=True)
class SyncConfig:
    """All settings of one sync run, resolved once at startup."""

    phrase_token: str
    sync_direction: str
    projects: tuple[Project, ...]
    repo_path: Path
    phrase_api_url: str = PHRASE_API_BASE_URL
    remove_unmentioned_keys: bool = False
    azure_token: str | None = None
    azure_uri: str | None = None
    azure_project_id: str | None = None
    azure_repository_id: str | None = None
    git_user_mail: str = DEFAULT_GIT_USER_MAIL
    git_user_name: str = DEFAULT_GIT_USER_NAME
    branch_name: str = DEFAULT_BRANCH_NAME
    target_branch: str = DEFAULT_TARGET_BRANCH
    poll_interval: int = DEFAULT_POLL_INTERVAL
    poll_attempts: int = DEFAULT_POLL_ATTEMPTS


def load_projects(path: Path | str) -> tuple[Project, ...]:
    """Read and validate the project list from a phrase.json file.

    Relative locale paths are resolved against the directory of the file.
    """
    config_path = Path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as err:
        raise ConfigError(f"No phrase config found at {config_path}") from err
    except (json.JSONDecodeError, OSError) as err:
        raise ConfigError(f"Failed to read {config_path}: {err}") from err

    try:
        data = PROJECTS_FILE_SCHEMA(raw)
    except vol.Invalid as err:
        raise ConfigError(f"Invalid phrase config in {config_path}: {err}") from err

    base_dir = config_path.resolve().parent
    projects = tuple(
        Project(
            name=item[CONF_NAME],
            project_id=item[CONF_PROJECT_ID],
            locale_path=base_dir / item[CONF_LOCALE_PATH],
            default_locale=item[CONF_DEFAULT_LOCALE],
        )
        for item in data[CONF_PROJECTS]
    )
    _LOGGER.debug("Loaded %d projects from %s", len(projects), config_path)
    return projects


def build_config(args: Namespace, environ: Mapping[str, str]) -> SyncConfig:
    """Merge command line flags over environment variables and validate them."""
    raw: dict[str, Any] = {
        key: value for key, value in vars(args).items() if value is not None
    }
    for key, env_name in ENV_FALLBACKS.items():
        if key not in raw and environ.get(env_name):
            raw[key] = environ[env_name]

    try:
        settings = SETTINGS_SCHEMA(raw)
    except vol.Invalid as err:
        raise ConfigError(f"Invalid settings: {err}") from err

    return SyncConfig(
        projects=load_projects(raw.get("config", DEFAULT_CONFIG_FILE)),
        repo_path=Path(raw.get("repo_path", ".")),
        **settings,
    )
