"""Azure DevOps pull request client."""
import asyncio
import logging
from typing import Any

import aiohttp

from .const import (
    AZURE_API_VERSION,
    AZURE_MERGE_STRATEGY_SQUASH,
    AZURE_VOTE_APPROVED,
    DEFAULT_TARGET_BRANCH,
    PULL_REQUEST_DESCRIPTION,
    PULL_REQUEST_TITLE,
)

_LOGGER = logging.getLogger(__name__)


class AzureDevOpsError(Exception):
    """Exception for Azure DevOps API errors."""


def _ref(branch_name: str) -> str:
    return f"refs/heads/{branch_name}"


class AzureDevOpsClient:
    """Creates, auto-completes and approves pull requests in one repository."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        collection_uri: str,
        token: str,
        project_id: str,
        repository_id: str,
    ) -> None:
        """Initialize the API client."""
        self.session = session
        self.collection_uri = collection_uri.rstrip("/")
        self.project_id = project_id
        self.repository_id = repository_id
        # Personal access tokens use basic auth with an empty user name
        self._auth = aiohttp.BasicAuth("", token)

    @property
    def base_url(self) -> str:
        return (
            f"{self.collection_uri}/{self.project_id}"
            f"/_apis/git/repositories/{self.repository_id}"
        )

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Make an authenticated request to the Azure DevOps Git API."""
        url = f"{self.base_url}{endpoint}"
        _LOGGER.debug("Making %s request to %s", method, url)

        try:
            async with self.session.request(
                method,
                url,
                auth=self._auth,
                params={"api-version": AZURE_API_VERSION},
                timeout=aiohttp.ClientTimeout(total=60),
                **kwargs,
            ) as response:
                response_text = await response.text()
                _LOGGER.debug("Response status: %s", response.status)

                if response.status not in (200, 201, 204):
                    _LOGGER.error(
                        "API request failed: %s %s - Status: %s, Response: %s",
                        method,
                        endpoint,
                        response.status,
                        response_text,
                    )
                    raise AzureDevOpsError(
                        f"API request failed with status {response.status}"
                    )

                if response.status == 204 or not response_text:
                    return {}

                return await response.json(content_type=None)

        except aiohttp.ClientError as err:
            _LOGGER.error("Network error during API request: %s", err)
            raise AzureDevOpsError(f"Network error: {err}") from err
        except asyncio.TimeoutError as err:
            _LOGGER.error("Timeout during API request: %s %s", method, endpoint)
            raise AzureDevOpsError("Request timed out") from err

    async def create_pull_request(
        self,
        source_branch: str,
        target_branch: str = DEFAULT_TARGET_BRANCH,
        title: str = PULL_REQUEST_TITLE,
        description: str = PULL_REQUEST_DESCRIPTION,
    ) -> dict[str, Any]:
        """Open a pull request from `source_branch` into `target_branch`."""
        payload = {
            "sourceRefName": _ref(source_branch),
            "targetRefName": _ref(target_branch),
            "title": title,
            "description": description,
        }
        data = await self._make_request("POST", "/pullrequests", json=payload)
        if "pullRequestId" not in data:
            raise AzureDevOpsError("Pull request response did not contain an id")
        return data

    async def enable_auto_complete(self, pull_request_id: int, identity_id: str) -> None:
        """Complete the pull request with a squash merge once policies pass."""
        payload = {
            "autoCompleteSetBy": {"id": identity_id},
            "completionOptions": {
                "deleteSourceBranch": True,
                "mergeStrategy": AZURE_MERGE_STRATEGY_SQUASH,
            },
        }
        await self._make_request("PATCH", f"/pullrequests/{pull_request_id}", json=payload)

    async def approve(self, pull_request_id: int, reviewer_id: str) -> None:
        """Cast an approving vote on behalf of `reviewer_id`."""
        payload = {"id": reviewer_id, "vote": AZURE_VOTE_APPROVED}
        await self._make_request(
            "PUT",
            f"/pullrequests/{pull_request_id}/reviewers/{reviewer_id}",
            json=payload,
        )

    async def publish_pull_request(
        self, branch_name: str, target_branch: str = DEFAULT_TARGET_BRANCH
    ) -> int:
        """Open a pull request for `branch_name`, auto-complete and approve it."""
        pull_request = await self.create_pull_request(branch_name, target_branch)
        pull_request_id = pull_request["pullRequestId"]
        _LOGGER.info("Pull request created: %s", pull_request_id)

        identity = (pull_request.get("createdBy") or {}).get("id")
        if not identity:
            raise AzureDevOpsError(
                f"Pull request {pull_request_id} has no creator identity"
            )

        await self.enable_auto_complete(pull_request_id, identity)
        _LOGGER.info("Pull request %s set to auto-complete by %s", pull_request_id, identity)

        await self.approve(pull_request_id, identity)
        _LOGGER.info("Pull request %s approved by %s", pull_request_id, identity)

        return pull_request_id
