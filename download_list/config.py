"""Service configuration read from the environment and a dotenv file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values

from download_list.errors import InvalidConfigError


def _env(name: str) -> dict:
    return {"env": name}


@dataclass(frozen=True)
class Environment:
    """Settings for the web server, broker, logger and downloader."""

    web_port: str = field(default="", metadata=_env("WEB_PORT"))
    broker_host: str = field(default="", metadata=_env("BROKER_HOST"))
    broker_port: int = field(default=0, metadata=_env("BROKER_PORT"))
    broker_topic: str = field(default="", metadata=_env("BROKER_TOPIC"))
    broker_db: int = field(default=0, metadata=_env("BROKER_DB"))
    log_pattern: str = field(default="", metadata=_env("LOG_PATTERN"))
    broker_kind: str = field(default="", metadata=_env("BROKER_KIND"))
    time_sleep: int = field(default=0, metadata=_env("TIME_SLEEP"))
    repository_kind: str = field(default="", metadata=_env("REPOSITORY_KIND"))
    repository_file: str = field(default="", metadata=_env("REPOSITORY_FILE"))
    download_path: str = field(default="", metadata=_env("DOWNLOAD_PATH"))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Optional[str]]) -> "Environment":
        """Build settings from variable names; absent variables keep defaults."""
        values = {}
        for spec in fields(cls):
            key = spec.metadata["env"]
            raw = mapping.get(key)
            if raw is None:
                continue
            if isinstance(spec.default, int):
                try:
                    values[spec.name] = int(raw, 0)
                except ValueError:
                    raise InvalidConfigError(
                        f"error loading environment variables: "
                        f"{key}={raw!r} is not an integer"
                    ) from None
            else:
                values[spec.name] = raw
        return cls(**values)


def load_environment(dotenv_path: Union[str, Path, None] = None) -> Environment:
    """Read the dotenv file, let process variables take precedence, and parse."""
    path = Path(dotenv_path) if dotenv_path is not None else Path(".env")
    if not path.is_file():
        raise InvalidConfigError(f"error loading .env file: open {path}: no such file")
    merged = {**dotenv_values(path), **os.environ}
    return Environment.from_mapping(merged)