"""Data objects mirrored from the Phrase API and the project configuration."""
from dataclasses import dataclass, field
from datetime import datetime
import logging
from pathlib import Path
from typing import Any

from .const import UPLOAD_STATE_ERROR, UPLOAD_STATE_SUCCESS

_LOGGER = logging.getLogger(__name__)


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by Phrase."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        _LOGGER.debug("Ignoring invalid timestamp: %s", value)
        return None


@dataclass(frozen=True)
class SourceLocale:
    """Locale a translation locale is derived from."""

    id: str
    name: str
    code: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SourceLocale":
        return cls(id=data.get("id", ""), name=data.get("name", ""), code=data.get("code", ""))


@dataclass(frozen=True)
class Locale:
    """Snapshot of a Phrase locale."""

    id: str
    name: str
    code: str
    default: bool = False
    main: bool = False
    rtl: bool = False
    plural_forms: tuple[str, ...] = ()
    source_locale: SourceLocale | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Locale":
        """Build a locale from a Phrase API payload."""
        source = data.get("source_locale")
        return cls(
            id=data["id"],
            name=data["name"],
            code=data.get("code", ""),
            default=bool(data.get("default", False)),
            main=bool(data.get("main", False)),
            rtl=bool(data.get("rtl", False)),
            plural_forms=tuple(data.get("plural_forms") or ()),
            source_locale=SourceLocale.from_dict(source) if source else None,
            created_at=_parse_timestamp(data.get("created_at")),
            updated_at=_parse_timestamp(data.get("updated_at")),
        )


@dataclass(frozen=True)
class Upload:
    """State of a Phrase upload as observed by a single status query."""

    id: str
    project_id: str
    status: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == UPLOAD_STATE_SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == UPLOAD_STATE_ERROR

    @property
    def is_terminal(self) -> bool:
        """Return True once Phrase will not change the state any more."""
        return self.succeeded or self.failed


@dataclass(frozen=True)
class Project:
    """A Phrase project entry from the configuration file."""

    name: str
    project_id: str
    locale_path: Path
    default_locale: str

    def locale_file(self, locale_name: str) -> Path:
        """Return the path of the JSON file holding a locale."""
        return self.locale_path / f"{locale_name}.json"


@dataclass
class SyncResult:
    """Outcome of one sync run."""

    direction: str
    project: str
    upload_id: str | None = None
    written_files: list[Path] = field(default_factory=list)
    pull_request_id: int | None = None
