"""Wait for Phrase to finish processing an upload."""
import asyncio
from collections.abc import Awaitable, Callable
import logging

from .const import DEFAULT_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL
from .models import Upload

_LOGGER = logging.getLogger(__name__)

UploadQuery = Callable[[str, str], Awaitable[Upload]]

TICKER_NAME_PREFIX = "phrase-upload-poll"


async def _tick(ticks: asyncio.Queue, interval: float) -> None:
    """Put a token on the queue every `interval` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        ticks.put_nowait(None)


async def ensure_upload_succeeded(
    query: UploadQuery,
    project_id: str,
    upload_id: str,
    interval: int = DEFAULT_POLL_INTERVAL,
    attempts: int = DEFAULT_POLL_ATTEMPTS,
) -> bool:
    """Poll the state of an upload until it is terminal or the budget runs out.

    `interval` is the delay between two queries in milliseconds and `attempts`
    the maximum number of queries. Returns True when Phrase reports success,
    False on an error state or when no terminal state was seen in time.
    Exceptions raised by `query` propagate unchanged.
    """
    if not upload_id:
        raise ValueError("upload_id must not be empty")
    if not project_id:
        raise ValueError("project_id must not be empty")

    ticks: asyncio.Queue = asyncio.Queue()
    ticker = asyncio.create_task(
        _tick(ticks, interval / 1000), name=f"{TICKER_NAME_PREFIX}-{upload_id}"
    )
    try:
        for attempt in range(1, attempts + 1):
            await ticks.get()
            upload = await query(project_id, upload_id)
            _LOGGER.debug(
                "Upload %s state after attempt %d/%d: %s",
                upload_id,
                attempt,
                attempts,
                upload.status,
            )
            if upload.succeeded:
                return True
            if upload.failed:
                _LOGGER.warning(
                    "upload details returned error state for upload with id %s",
                    upload_id,
                )
                return False

        _LOGGER.warning(
            "timed out after %dms while waiting for Phrase to process upload with id %s",
            interval * attempts,
            upload_id,
        )
        return False
    finally:
        ticker.cancel()
