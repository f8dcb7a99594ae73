"""The media service: HTTP intake, queue consumption and downloading."""

from __future__ import annotations

import queue as queue_module
from typing import Any, Callable, Optional

from download_list.config import Environment
from download_list.dto import MessageListen
from download_list.messages import Broker, BrokerConfig, Message
from download_list.redis_store import get_broker
from download_list.web import WebServer, new_web_server
from download_list.youtube import DownloadInput, download

_NAME = "Midia service"


class MediaService:
    """Runs the web server, the queue listener and the download workers."""

    def __init__(
        self,
        server: WebServer,
        broker: Broker,
        logger: Any,
        env: Environment,
        downloader: Callable[[DownloadInput], None] = download,
    ) -> None:
        self.server = server
        self.broker = broker
        self.logger = logger
        self.env = env
        self.downloader = downloader

    def web_server(self) -> None:
        """Run the HTTP server; errors are logged and re-raised."""
        try:
            self.server.start()
        except Exception as exc:
            self.logger.error(_NAME, "Error starting server: " + str(exc))
            raise
        self.logger.info(_NAME, "Server started successfully")

    def listen_to_queue(self, queue: "queue_module.Queue[Optional[Message]]") -> None:
        """Feed messages from the configured topic into ``queue``."""
        config = BrokerConfig(topic=[self.env.broker_topic])
        try:
            self.broker.listen_to_queue(config, queue)
        except Exception as exc:
            self.logger.error(_NAME, "Error listening to queue: " + str(exc))

    def read_messages(self, queue: "queue_module.Queue[Optional[Message]]") -> None:
        """Download each queued job until a ``None`` sentinel arrives."""
        while True:
            message = queue.get()
            if message is None:
                break
            try:
                job = MessageListen.from_json(message.value)
            except ValueError as exc:
                self.logger.error(_NAME, "Error unmarshalling message: " + str(exc))
                job = MessageListen()
            entity = DownloadInput(
                url=job.url,
                path=self.env.download_path,
                kind=job.kind(),
                quality=job.quality_flag(),
            )
            try:
                self.downloader(entity)
            except Exception as exc:
                self.logger.error(_NAME, "Error downloading video: " + str(exc))


def new_media_service(env: Environment, logger: Any) -> MediaService:
    """Connect to the broker and assemble the service."""
    try:
        broker = get_broker(env.broker_host, env.broker_port)
    except Exception as exc:
        logger.error("DI", f"Error creating broker: {exc}")
        raise
    server = new_web_server(broker, env, logger)
    return MediaService(server, broker, logger, env)