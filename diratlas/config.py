from __future__ import annotations
import json
from dataclasses import dataclass, replace
from datetime import timezone, tzinfo
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidArgumentError

DEFAULT_ALGORITHM = "sha256"
DEFAULT_CHUNK = 8192
DEFAULT_SAMPLE_LIMIT = 1024
DEFAULT_NON_PRINTABLE_THRESHOLD = 0.05


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """None/"local" -> host local zone (returned as None), "UTC" -> utc, else IANA name."""
    if name is None:
        return None
    name = name.strip()
    if not name or name.lower() == "local":
        return None
    if name.upper() in ("UTC", "Z"):
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidArgumentError(f"Unknown timezone: {name!r}") from e


@dataclass(frozen=True)
class ScanConfig:
    directories: Tuple[str, ...] = ()
    timezone: Optional[tzinfo] = None
    checksum_algorithm: str = DEFAULT_ALGORITHM
    chunk_size: int = DEFAULT_CHUNK
    sample_limit: int = DEFAULT_SAMPLE_LIMIT
    non_printable_threshold: float = DEFAULT_NON_PRINTABLE_THRESHOLD

    @classmethod
    def from_options(cls, options: Dict[str, Any]) -> "ScanConfig":
        """Build a config from importer options:

            {"directoryJsonValue": [{"directory": "/data/in"}, ...], "timezone": "UTC"}

        Blank directory entries are skipped. At least one directory is required.
        """
        if not isinstance(options, dict):
            raise InvalidArgumentError("Options must be a JSON object")
        entries = options.get("directoryJsonValue")
        if not isinstance(entries, list):
            raise InvalidArgumentError("directoryJsonValue must be a list of {directory: <path>}")

        dirs: List[str] = []
        for e in entries:
            if not isinstance(e, dict):
                raise InvalidArgumentError(f"Bad directory entry: {e!r}")
            d = str(e.get("directory") or "").strip()
            if d:
                dirs.append(d)
        if not dirs:
            raise InvalidArgumentError("No directories given")

        kwargs: Dict[str, Any] = {"directories": tuple(dirs)}
        if "timezone" in options:
            kwargs["timezone"] = resolve_timezone(options.get("timezone"))
        if options.get("checksumAlgorithm"):
            kwargs["checksum_algorithm"] = str(options["checksumAlgorithm"])
        return cls(**kwargs)

    @classmethod
    def from_json(cls, text: str) -> "ScanConfig":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidArgumentError(f"Options are not valid JSON: {e}") from e
        return cls.from_options(data)

    def with_directories(self, directories: List[str]) -> "ScanConfig":
        return replace(self, directories=tuple(directories))
