"""Commit and push downloaded translations with GitPython."""
import logging
from pathlib import Path

import git

from .const import (
    COMMIT_MESSAGE,
    DEFAULT_GIT_USER_MAIL,
    DEFAULT_GIT_USER_NAME,
    LOCALE_FILE_PATTERN,
)

_LOGGER = logging.getLogger(__name__)


class GitPublishError(Exception):
    """Exception for failed git operations."""


class GitRepository:
    """Helper class for git operations with consistent error handling."""

    def __init__(self, repo_path: Path | str) -> None:
        self.repo_path = Path(repo_path)
        try:
            self.repo = git.Repo(self.repo_path)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as err:
            raise GitPublishError(f"Invalid git repository at {repo_path}") from err
        except git.exc.GitCommandError as err:
            raise GitPublishError(f"Git error accessing repository: {err!s}") from err

    def _handle_git_error(self, operation: str, error: Exception) -> None:
        """Convert git errors to GitPublishError with context."""
        raise GitPublishError(f"Git error {operation}: {error!s}") from error

    def configure_user(
        self,
        email: str = DEFAULT_GIT_USER_MAIL,
        name: str = DEFAULT_GIT_USER_NAME,
    ) -> None:
        """Set the commit identity for this repository."""
        try:
            with self.repo.config_writer() as config:
                config.set_value("user", "email", email)
                config.set_value("user", "name", name)
        except git.exc.GitCommandError as err:
            self._handle_git_error("configuring user", err)

    def has_changes(self) -> bool:
        """Check for modified or untracked files."""
        try:
            return self.repo.is_dirty(untracked_files=True)
        except git.exc.GitCommandError as err:
            self._handle_git_error("checking changes", err)
            return False

    def push_branch(self, branch_name: str, message: str = COMMIT_MESSAGE) -> None:
        """Commit locale files on a new branch and push it to origin."""
        try:
            self.repo.git.add(LOCALE_FILE_PATTERN)
            self.repo.git.commit("-m", message)
            self.repo.git.checkout("-b", branch_name)
            self.repo.git.push("--set-upstream", "origin", branch_name)
        except git.exc.GitCommandError as err:
            self._handle_git_error(f"publishing branch {branch_name}", err)

        _LOGGER.info("Pushed branch %s", branch_name)
