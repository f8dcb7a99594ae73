"""Command that starts the web server, queue listener and download workers."""

from __future__ import annotations

import argparse
import queue
import threading
from typing import Any, Callable, List, Optional

from download_list.config import load_environment
from download_list.errors import InvalidConfigError
from download_list.logger import new_logger
from download_list.service import new_media_service

_WORKERS = 8


def _quietly(target: Callable[..., Any], *args: Any) -> None:
    try:
        target(*args)
    except Exception:
        pass


def _spawn(target: Callable[..., Any], *args: Any) -> None:
    threading.Thread(target=_quietly, args=(target, *args), daemon=True).start()


def main(argv: Optional[List[str]] = None) -> int:
    """Run the service until interrupted; return a non-zero status on setup failure."""
    parser = argparse.ArgumentParser(prog="download_list")
    parser.add_argument("--env-file", default=".env", help="dotenv file to load")
    args = parser.parse_args(argv)

    try:
        env = load_environment(args.env_file)
    except InvalidConfigError as exc:
        print("Error loading environment variables:", exc)
        return 1

    try:
        logger = new_logger(env.log_pattern)
    except OSError as exc:
        print("Error creating logger:", exc)
        return 1

    try:
        service = new_media_service(env, logger)
    except Exception as exc:
        logger.error("DI", f"Error creating midia service: {exc}")
        return 1

    jobs: "queue.Queue" = queue.Queue()
    for _ in range(_WORKERS):
        _spawn(service.read_messages, jobs)
    _spawn(service.listen_to_queue, jobs)
    _spawn(service.web_server)

    print("Server started on port", env.web_port)

    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())