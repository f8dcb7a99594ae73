"""Downloading media with the yt-dlp command-line tool."""

from __future__ import annotations

import os
import posixpath
import subprocess
from dataclasses import dataclass
from typing import List

from download_list.errors import DownloadListError
from download_list.text import sanitize

_FALLBACK_TITLE = "video-title"


class DownloadError(DownloadListError):
    """A download could not be prepared or yt-dlp failed."""


@dataclass
class DownloadInput:
    """One download job: where from, where to, and what kind."""

    url: str = ""
    quality: str = ""
    path: str = ""
    kind: str = ""

    def is_quality(self) -> bool:
        """Sanitize the quality flag and report whether it asks for superior quality."""
        self.quality = sanitize(self.quality)
        return self.quality in ("S", "s")

    def is_audio(self) -> bool:
        """Sanitize the kind flag and report whether it asks for audio."""
        self.kind = sanitize(self.kind)
        return self.kind in ("A", "a")

    def set_name_audio(self) -> None:
        if self.is_audio():
            self.quality = "S"
            self.path += ".mp3"

    def set_name_video(self) -> None:
        self.path += ".mp4"


def video_title(url: str) -> str:
    """Ask yt-dlp for the title, sanitized; a fixed name if that fails."""
    try:
        result = subprocess.run(["yt-dlp", "--get-title", url], capture_output=True)
    except OSError:
        return _FALLBACK_TITLE
    if result.returncode != 0:
        return _FALLBACK_TITLE
    output = result.stdout
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="replace")
    return sanitize(output)


def _prepare_path(entity: DownloadInput) -> None:
    title = video_title(entity.url)
    try:
        os.makedirs(entity.path, exist_ok=True)
    except OSError as exc:
        print("Erro ao criar diretório: ", exc, sep="", end="")
        raise DownloadError(str(exc)) from exc
    joined = "/".join(part for part in (entity.path, "/", title) if part)
    entity.path = posixpath.normpath(joined)
    print("Pasta criada com sucesso: ", entity.path)


def _run(args: List[str], error_prefix: str) -> None:
    try:
        result = subprocess.run(args)
    except OSError as exc:
        raise DownloadError(f"{error_prefix}: {exc}") from exc
    if result.returncode != 0:
        raise DownloadError(f"{error_prefix}: exit status {result.returncode}")


def _get_audio(entity: DownloadInput) -> None:
    entity.set_name_audio()
    print(f"Baixando áudio de {entity.url} em qualidade regular...")
    print(f"Salvando em {entity.path}")
    _run(
        ["yt-dlp", "-f", "bestaudio", "-o", entity.path, entity.url],
        "erro ao baixar áudio",
    )


def _get_quality(entity: DownloadInput) -> None:
    print(f"Baixando vídeo {entity.url} em qualidade superior...")
    _run(
        ["yt-dlp", "-f", "bestvideo+bestaudio/best", "-o", entity.path, entity.url],
        "erro ao baixar vídeo",
    )
    print(f"Vídeo baixado com sucesso em {entity.path}")


def _get_regular(entity: DownloadInput) -> None:
    entity.set_name_video()
    print(f"Baixando vídeo {entity.url} em qualidade regular...")
    _run(["yt-dlp", "-f", "mp4", "-o", entity.path, entity.url], "erro ao baixar vídeo")


def download(entity: DownloadInput) -> None:
    """Create the target folder and fetch audio, best video or regular video."""
    _prepare_path(entity)
    if entity.is_audio():
        _get_audio(entity)
    elif entity.is_quality():
        _get_quality(entity)
    else:
        _get_regular(entity)