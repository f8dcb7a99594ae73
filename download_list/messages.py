"""Queue messages, broker settings and the storage interfaces they travel through."""

from __future__ import annotations

import base64
import json
import queue
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, List, Mapping, Optional, Union

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_TIME_PATTERN = re.compile(
    r"\A(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})\Z"
)


def _lookup(data: Mapping[str, Any], name: str) -> Any:
    """Find a key exactly, falling back to a case-insensitive match."""
    if name in data:
        return data[name]
    lowered = name.lower()
    for key, value in data.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += f".{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _parse_time(text: str) -> datetime:
    match = _TIME_PATTERN.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp {text!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction or "").ljust(6, "0")[:6])
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tz
    )


def _decode_bytes(raw: Any, name: str) -> bytes:
    if raw is None:
        return b""
    if not isinstance(raw, str):
        raise ValueError(f"field {name!r} must be a base64 string")
    return base64.b64decode(raw, validate=True)


def _decode_str(raw: Any, name: str) -> str:
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise ValueError(f"field {name!r} must be a string")
    return raw


@dataclass
class Header:
    """A key/value pair attached to a message."""

    key: str = ""
    value: str = ""


@dataclass
class Message:
    """A message as it is stored in and read from the broker."""

    topic: str = ""
    value: bytes = b""
    key: bytes = b""
    timestamp: datetime = _ZERO_TIME
    headers: List[Header] = field(default_factory=list)
    group_id: str = ""

    def to_json(self) -> bytes:
        """Compact JSON; byte fields are base64, empty ones and no headers are null."""
        payload = {
            "topic": self.topic,
            "value": base64.b64encode(self.value).decode("ascii") if self.value else None,
            "key": base64.b64encode(self.key).decode("ascii") if self.key else None,
            "timestamp": _format_time(self.timestamp),
            "headers": (
                [{"Key": h.key, "Value": h.value} for h in self.headers]
                if self.headers
                else None
            ),
            "group_id": self.group_id,
        }
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode(
            "utf-8"
        )

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "Message":
        """Parse a message; absent or null fields keep their defaults."""
        obj = json.loads(data)
        if not isinstance(obj, dict):
            raise ValueError("message must be a JSON object")
        raw_time = _lookup(obj, "timestamp")
        if raw_time is None:
            timestamp = _ZERO_TIME
        elif isinstance(raw_time, str):
            timestamp = _parse_time(raw_time)
        else:
            raise ValueError("field 'timestamp' must be a string")
        raw_headers = _lookup(obj, "headers")
        if raw_headers is None:
            raw_headers = []
        if not isinstance(raw_headers, list) or not all(
            isinstance(item, dict) for item in raw_headers
        ):
            raise ValueError("field 'headers' must be a list of objects")
        headers = [
            Header(
                key=_decode_str(_lookup(item, "Key"), "Key"),
                value=_decode_str(_lookup(item, "Value"), "Value"),
            )
            for item in raw_headers
        ]
        return cls(
            topic=_decode_str(_lookup(obj, "topic"), "topic"),
            value=_decode_bytes(_lookup(obj, "value"), "value"),
            key=_decode_bytes(_lookup(obj, "key"), "key"),
            timestamp=timestamp,
            headers=headers,
            group_id=_decode_str(_lookup(obj, "group_id"), "group_id"),
        )


@dataclass
class BrokerConfig:
    """Settings for consuming from a broker."""

    topic: Optional[List[str]] = None
    group_name: str = ""
    consumer_name: str = ""
    auto_offset_reset: str = ""
    enable_auto_commit: bool = False
    auto_commit_interval_ms: str = ""
    partition: int = 0


class Broker(ABC):
    """A message queue that can be published to and listened on."""

    @abstractmethod
    def ping(self) -> None:
        """Raise if the server cannot be reached."""

    @abstractmethod
    def listen_to_queue(self, config: BrokerConfig, queue: "queue.Queue[Message]") -> None:
        """Consume messages from the configured topics into ``queue``."""

    @abstractmethod
    def publish(self, message: Message) -> None:
        """Put ``message`` on its topic."""


class Cacher(ABC):
    """A key/value store with expiry."""

    @abstractmethod
    def ping(self) -> None:
        """Raise if the server cannot be reached."""

    @abstractmethod
    def get(self, key: str) -> str:
        """Return the value stored under ``key``."""

    @abstractmethod
    def set(self, key: str, value: str, expiration: Union[timedelta, float, None]) -> None:
        """Store ``value`` under ``key``, expiring after ``expiration`` if positive."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Whether ``key`` is present."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``."""

    @abstractmethod
    def keys(self) -> List[str]:
        """All keys in the store."""