"""Phrase API Client."""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import aiohttp

from .const import (
    DEFAULT_POLL_ATTEMPTS,
    DEFAULT_POLL_INTERVAL,
    PHRASE_API_BASE_URL,
    PHRASE_FILE_FORMAT,
    PHRASE_PAGE_SIZE,
)
from .models import Locale, Upload
from .poller import ensure_upload_succeeded

_LOGGER = logging.getLogger(__name__)


class PhraseAPIError(Exception):
    """Exception for Phrase API errors."""


class PhraseAuthError(PhraseAPIError):
    """Exception for authentication errors."""


class PhraseUploadError(PhraseAPIError):
    """Exception for uploads that Phrase did not process successfully."""


class PhraseAPIClient:
    """Phrase API Client."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        token: str,
        base_url: str = PHRASE_API_BASE_URL,
    ) -> None:
        """Initialize the API client."""
        self.session = session
        self.token = token
        self.base_url = base_url.rstrip("/")

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        *,
        expected_status: tuple[int, ...] = (200,),
        **kwargs: Any,
    ) -> str:
        """Make an authenticated request to the Phrase API and return the body."""
        _LOGGER.debug("Making %s request to %s", method, endpoint)
        headers = {"Authorization": f"token {self.token}"}
        url = f"{self.base_url}{endpoint}"

        try:
            async with self.session.request(
                method,
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=60),
                **kwargs,
            ) as response:
                response_text = await response.text()
                _LOGGER.debug("Response status: %s", response.status)

                if response.status == 401:
                    _LOGGER.error("Phrase rejected the access token")
                    raise PhraseAuthError("Invalid or expired Phrase access token")

                if response.status not in expected_status:
                    _LOGGER.error(
                        "API request failed: %s %s - Status: %s, Response: %s",
                        method,
                        endpoint,
                        response.status,
                        response_text,
                    )
                    raise PhraseAPIError(
                        f"API request failed with status {response.status}"
                    )

                return response_text

        except aiohttp.ClientError as err:
            _LOGGER.error("Network error during API request: %s", err)
            raise PhraseAPIError(f"Network error: {err}") from err
        except asyncio.TimeoutError as err:
            _LOGGER.error("Timeout during API request: %s %s", method, endpoint)
            raise PhraseAPIError("Request timed out") from err

    async def _make_json_request(
        self, method: str, endpoint: str, **kwargs: Any
    ) -> Any:
        """Make a request whose response body must be JSON."""
        body = await self._make_request(method, endpoint, **kwargs)
        try:
            return json.loads(body) if body else {}
        except ValueError as err:
            raise PhraseAPIError(f"Invalid JSON in response to {endpoint}") from err

    async def fetch_locales(self, project_id: str) -> list[Locale]:
        """Get all locales of a project."""
        _LOGGER.debug("Fetching locales for project %s", project_id)

        locales: list[Locale] = []
        page = 1

        while True:
            params = {"page": page, "per_page": PHRASE_PAGE_SIZE}
            data = await self._make_json_request(
                "GET", f"/projects/{project_id}/locales", params=params
            )
            if not isinstance(data, list):
                raise PhraseAPIError("Unexpected locale list payload")

            locales.extend(Locale.from_dict(item) for item in data)

            if len(data) < PHRASE_PAGE_SIZE:
                break

            page += 1

        _LOGGER.debug("Fetched %d locales for project %s", len(locales), project_id)
        return locales

    async def upload_locale(
        self,
        locale_id: str,
        locale_path: Path | str,
        locale_name: str,
        project_id: str,
    ) -> str:
        """Upload a locale file and return the id of the created upload."""
        file_path = Path(locale_path) / f"{locale_name}.json"
        _LOGGER.debug("Uploading %s to project %s", file_path, project_id)

        form = aiohttp.FormData()
        form.add_field(
            "file",
            file_path.read_bytes(),
            filename=file_path.name,
            content_type="application/json",
        )
        form.add_field("locale_id", locale_id)
        form.add_field("file_format", PHRASE_FILE_FORMAT)

        data = await self._make_json_request(
            "POST",
            f"/projects/{project_id}/uploads",
            data=form,
            expected_status=(201,),
        )
        upload_id = data.get("id") if isinstance(data, dict) else None
        if not upload_id:
            raise PhraseAPIError("Upload response did not contain an id")
        return upload_id

    async def download_locale(self, locale_id: str, project_id: str) -> str:
        """Download the translations of a locale as nested JSON."""
        _LOGGER.debug("Downloading locale %s of project %s", locale_id, project_id)
        return await self._make_request(
            "GET",
            f"/projects/{project_id}/locales/{locale_id}/download",
            params={"file_format": PHRASE_FILE_FORMAT},
        )

    async def get_upload(self, project_id: str, upload_id: str) -> Upload:
        """Get the current state of an upload.

        A body that cannot be parsed yields an upload without status, which the
        poller treats as still pending.
        """
        body = await self._make_request(
            "GET", f"/projects/{project_id}/uploads/{upload_id}"
        )
        try:
            data = json.loads(body)
        except ValueError:
            _LOGGER.debug("Could not parse upload details for %s", upload_id)
            data = None

        state = data.get("state") if isinstance(data, dict) else None
        return Upload(id=upload_id, project_id=project_id, status=state)

    async def ensure_upload_succeeded(
        self,
        project_id: str,
        upload_id: str,
        interval: int = DEFAULT_POLL_INTERVAL,
        attempts: int = DEFAULT_POLL_ATTEMPTS,
    ) -> bool:
        """Wait until Phrase has processed an upload; see poller."""
        return await ensure_upload_succeeded(
            self.get_upload, project_id, upload_id, interval, attempts
        )

    async def remove_unmentioned_keys(
        self,
        project_id: str,
        upload_id: str,
        interval: int = DEFAULT_POLL_INTERVAL,
        attempts: int = DEFAULT_POLL_ATTEMPTS,
    ) -> int:
        """Delete keys that were not part of a successful upload.

        Returns the number of deleted keys as reported by Phrase.
        """
        if not upload_id:
            raise ValueError("upload_id must not be empty")

        if not await self.ensure_upload_succeeded(
            project_id, upload_id, interval, attempts
        ):
            _LOGGER.warning(
                "unmentioned keys for upload with id %s could not be removed.",
                upload_id,
            )
            raise PhraseUploadError(f"Upload {upload_id} did not succeed")

        data = await self._make_json_request(
            "DELETE",
            f"/projects/{project_id}/keys",
            params={"q": f"unmentioned_in_upload:{upload_id}"},
        )
        affected = data.get("records_affected", 0) if isinstance(data, dict) else 0
        _LOGGER.info("Removed %s unmentioned keys from project %s", affected, project_id)
        return affected
