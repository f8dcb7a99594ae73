"""Turning a download request into queued messages."""

from __future__ import annotations

from typing import Any, List

from download_list.config import Environment
from download_list.dto import MessageListen, Request
from download_list.errors import NilDependencyError
from download_list.messages import Broker, Message


class MediaUseCase:
    """Publishes one queue message per requested URL."""

    def __init__(self, broker: Broker, env: Environment, logger: Any) -> None:
        if broker is None:
            raise NilDependencyError("broker")
        if env is None:
            raise NilDependencyError("enviroment")
        if logger is None:
            raise NilDependencyError("logger")
        self.broker = broker
        self.env = env
        self.logger = logger

    def post_urls(self, request: Request) -> List[Exception]:
        """Publish every URL of ``request``; return the errors met on the way."""
        errors: List[Exception] = []
        for url in request.urls:
            job = MessageListen(url=url, audio=request.audio, quality=request.quality)
            try:
                payload = job.to_json()
            except (TypeError, ValueError) as exc:
                self.logger.error("Error marshaling request: ", exc)
                errors.append(exc)
                continue
            message = Message(topic=self.env.broker_topic, value=payload)
            try:
                self.broker.publish(message)
            except Exception as exc:
                self.logger.error("Error publishing message: ", exc)
                errors.append(exc)
                continue
            self.logger.info("Message published successfully")
        return errors