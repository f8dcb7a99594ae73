"""Data carried between the HTTP endpoint, the queue and the downloader."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Union

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _lookup(data: Mapping[str, Any], name: str) -> Any:
    """Find a key exactly, falling back to a case-insensitive match."""
    if name in data:
        return data[name]
    for key, value in data.items():
        if isinstance(key, str) and key.lower() == name:
            return value
    return None


def _as_bool(data: Mapping[str, Any], name: str) -> bool:
    value = _lookup(data, name)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {name!r} must be a boolean")
    return value


def _as_str(data: Mapping[str, Any], name: str) -> str:
    value = _lookup(data, name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {name!r} must be a string")
    return value


@dataclass
class MessageListen:
    """One download job as it travels through the queue."""

    url: str = ""
    audio: bool = False
    quality: bool = False

    def kind(self) -> str:
        """'A' for audio, 'V' for video."""
        return "A" if self.audio else "V"

    def quality_flag(self) -> str:
        """'S' for superior quality, 'N' for normal."""
        return "S" if self.quality else "N"

    def to_json(self) -> bytes:
        """Compact JSON with HTML-sensitive characters escaped."""
        text = json.dumps(
            {"url": self.url, "audio": self.audio, "quality": self.quality},
            ensure_ascii=False,
            separators=(",", ":"),
        )
        for char, escape in _HTML_ESCAPES.items():
            text = text.replace(char, escape)
        return text.encode("utf-8")

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "MessageListen":
        """Parse a JSON object; unknown keys are ignored."""
        obj = json.loads(data)
        if not isinstance(obj, dict):
            raise ValueError("message must be a JSON object")
        return cls(
            url=_as_str(obj, "url"),
            audio=_as_bool(obj, "audio"),
            quality=_as_bool(obj, "quality"),
        )


@dataclass
class Request:
    """Body of a request to enqueue one or more URLs."""

    urls: List[str] = field(default_factory=list)
    audio: bool = False
    quality: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Request":
        """Validate and build a request from decoded JSON."""
        if not isinstance(data, Mapping):
            raise ValueError("request must be a JSON object")
        urls = _lookup(data, "urls")
        if urls is None:
            urls = []
        if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
            raise ValueError("field 'urls' must be a list of strings")
        return cls(
            urls=list(urls),
            audio=_as_bool(data, "audio"),
            quality=_as_bool(data, "quality"),
        )