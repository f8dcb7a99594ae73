"""HTTP server exposing the endpoint that enqueues downloads."""

from __future__ import annotations

import json
from typing import Any, Callable

from flask import Flask, jsonify
from flask import request as http_request

from download_list.config import Environment
from download_list.dto import Request
from download_list.errors import InvalidConfigError, NilDependencyError
from download_list.messages import Broker
from download_list.usecase import MediaUseCase


class WebServer:
    """A Flask application bound to a ``host:port`` address."""

    def __init__(self, web_port: str) -> None:
        self.web_port = web_port
        self.app = Flask("download_list")

    def add_route(self, method: str, path: str, handler: Callable[..., Any]) -> None:
        """Register ``handler`` for ``method`` requests to ``path``."""
        self.app.add_url_rule(
            path,
            endpoint=f"{method.upper()} {path}",
            view_func=handler,
            methods=[method.upper()],
        )

    def _address(self) -> tuple:
        host, _, port = self.web_port.rpartition(":")
        try:
            number = int(port)
        except ValueError:
            raise InvalidConfigError(f"invalid web port {self.web_port!r}") from None
        return host or "0.0.0.0", number

    def start(self) -> None:
        """Serve requests until the server stops."""
        host, port = self._address()
        self.app.run(host=host, port=port)


def create_media_handler(usecase: MediaUseCase) -> Callable[[], Any]:
    """Build the view that queues the URLs posted in a JSON body."""

    def get_media():
        body = http_request.get_data()
        try:
            payload = Request.from_dict(json.loads(body)) if body.strip() else Request()
        except ValueError:
            return jsonify("Invalid request"), 400
        if usecase.post_urls(payload):
            return jsonify("Internal server error"), 500
        return jsonify("URL posted successfully"), 200

    return get_media


def new_web_server(broker: Broker, env: Environment, logger: Any) -> WebServer:
    """Wire the use case and handler into a server listening on ``env.web_port``."""
    try:
        usecase = MediaUseCase(broker, env, logger)
    except NilDependencyError:
        logger.fatal("Failed to create usecase")
        raise
    server = WebServer(env.web_port)
    server.add_route("POST", "/midia", create_media_handler(usecase))
    return server