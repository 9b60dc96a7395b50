"""Write-ahead log of reconciliation events, one JSON object per line."""

from __future__ import annotations

import dataclasses
import json
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, TextIO


class EntryType(str, Enum):
    """Kind of event recorded in the log."""

    OBSERVED = "observed"
    DECIDED = "decided"
    EXECUTING = "executing"
    EXECUTED = "executed"
    FAILED = "failed"
    SKIPPED = "skipped"


def _json_default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value // timedelta(microseconds=1) * 1000
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.astimezone()


@dataclass
class Entry:
    """One logged event."""

    timestamp: datetime
    sequence: int
    type: EntryType | str
    resource_id: str = ""
    data: Any = None
    error: str = ""

    def to_json(self) -> str:
        """The entry as a single JSON line, without the newline."""
        entry_type = self.type.value if isinstance(self.type, EntryType) else str(self.type)
        record: dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "sequence": self.sequence,
            "type": entry_type,
        }
        if self.resource_id:
            record["resource_id"] = self.resource_id
        record["data"] = self.data
        if self.error:
            record["error"] = self.error
        return json.dumps(record, default=_json_default)


def entry_from_json(line: str | bytes) -> Entry:
    """Parse one log line; ValueError if it is not a valid entry."""
    try:
        record = json.loads(line)
        if not isinstance(record, dict):
            raise ValueError("entry is not a JSON object")
        raw_type = str(record.get("type", ""))
        entry_type: EntryType | str
        try:
            entry_type = EntryType(raw_type)
        except ValueError:
            entry_type = raw_type
        return Entry(
            timestamp=_parse_timestamp(record["timestamp"]),
            sequence=int(record.get("sequence", 0)),
            type=entry_type,
            resource_id=str(record.get("resource_id") or ""),
            data=record.get("data"),
            error=str(record.get("error") or ""),
        )
    except (ValueError, KeyError, TypeError) as exc:
        raise ValueError(f"failed to unmarshal entry: {exc}") from exc


class WAL:
    """Append-only, fsync-per-entry audit log in a directory."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(mode=0o750, parents=True, exist_ok=True)
        filename = f"elava-{datetime.now().strftime('%Y%m%d-%H%M%S')}.wal"
        self.path = self.directory / filename
        fd = os.open(self.path, os.O_CREAT | os.O_APPEND | os.O_WRONLY, 0o600)
        self._file: TextIO | None = os.fdopen(fd, "a", encoding="utf-8")
        self._lock = threading.Lock()
        self._sequence = 0

    @property
    def sequence(self) -> int:
        """Sequence number of the last entry written."""
        return self._sequence

    def append(self, entry_type: EntryType, resource_id: str, data: Any) -> Entry:
        """Write an entry and return it."""
        return self._append(entry_type, resource_id, data, "")

    def append_error(
        self, entry_type: EntryType, resource_id: str, data: Any, error: BaseException | str
    ) -> Entry:
        """Write an entry carrying an error message and return it."""
        return self._append(entry_type, resource_id, data, str(error))

    def _append(self, entry_type: EntryType, resource_id: str, data: Any, error: str) -> Entry:
        with self._lock:
            if self._file is None:
                raise ValueError("WAL is closed")
            self._sequence += 1
            try:
                encoded = json.dumps(data, default=_json_default)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"failed to marshal data: {exc}") from exc
            entry = Entry(
                timestamp=datetime.now(timezone.utc),
                sequence=self._sequence,
                type=entry_type,
                resource_id=resource_id,
                data=json.loads(encoded),
                error=error,
            )
            self._file.write(entry.to_json() + "\n")
            self._file.flush()
            os.fsync(self._file.fileno())
            return entry

    def close(self) -> None:
        """Flush and close the log file."""
        with self._lock:
            if self._file is not None:
                self._file.flush()
                self._file.close()
                self._file = None

    def __enter__(self) -> WAL:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class WALReader:
    """Iterates over the entries of one log file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._file: TextIO = open(self.path, encoding="utf-8")

    def __iter__(self) -> WALReader:
        return self

    def __next__(self) -> Entry:
        line = self._file.readline()
        if not line:
            raise StopIteration
        return entry_from_json(line)

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> WALReader:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def wal_files(directory: str | os.PathLike[str]) -> list[Path]:
    """Log files in a directory, in name order."""
    return sorted(Path(directory).glob("elava-*.wal"))


def replay(
    directory: str | os.PathLike[str],
    since: datetime,
    handler: Callable[[Entry], Any],
) -> int:
    """Hand every entry newer than ``since`` to ``handler``; return how many."""
    cutoff = _aware(since)
    count = 0
    for path in wal_files(directory):
        with WALReader(path) as reader:
            for entry in reader:
                if entry.timestamp > cutoff:
                    handler(entry)
                    count += 1
    return count