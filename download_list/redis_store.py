"""Redis-backed broker and cache."""

from __future__ import annotations

import queue as queue_module
from datetime import timedelta
from typing import Any, List, Union

import redis

from download_list.errors import BrokerConnectionError, InvalidConfigError
from download_list.messages import Broker, BrokerConfig, Cacher, Message

_CONNECT_FAILURE = (
    "failed to connect to Redis: please check if the Redis server is running and accessible"
)


def _text(raw: Any) -> str:
    return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)


class RedisStore(Broker, Cacher):
    """Broker over Redis lists and cache over Redis keys."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def connect(cls, host: str, port: int, db: int = 0) -> "RedisStore":
        """Create a store for the server at ``host:port`` using database ``db``."""
        return cls(redis.Redis(host=host, port=port, db=db))

    def ping(self) -> None:
        try:
            self._client.ping()
        except redis.exceptions.RedisError as exc:
            raise BrokerConnectionError(str(exc)) from exc

    def listen_to_queue(
        self, config: BrokerConfig, queue: "queue_module.Queue[Message]"
    ) -> None:
        """Block forever, moving each popped message into ``queue``."""
        if config is None or config.topic is None:
            raise InvalidConfigError("invalid config")
        while True:
            try:
                popped = self._client.blpop(list(config.topic), timeout=0)
            except redis.exceptions.RedisError as exc:
                print("Erro ao ler item da fila:", exc)
                continue
            if not popped:
                continue
            try:
                message = Message.from_json(popped[1])
            except ValueError:
                message = Message()
            queue.put(message)

    def publish(self, message: Message) -> None:
        self._client.lpush(message.topic, message.to_json())

    def get(self, key: str) -> str:
        raw = self._client.get(key)
        if raw is None:
            raise KeyError(key)
        return _text(raw)

    def set(
        self, key: str, value: str, expiration: Union[timedelta, float, None] = None
    ) -> None:
        if expiration is not None and not isinstance(expiration, timedelta):
            expiration = timedelta(seconds=expiration)
        if expiration is not None and expiration > timedelta(0):
            self._client.set(key, value, px=expiration)
        else:
            self._client.set(key, value)

    def exists(self, key: str) -> bool:
        try:
            return self._client.exists(key) > 0
        except redis.exceptions.RedisError:
            return False

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def keys(self) -> List[str]:
        return [_text(name) for name in self._client.keys("*")]


def get_broker(host: str, port: int) -> RedisStore:
    """Connect to a reachable Redis broker or raise."""
    if not host or port == 0:
        raise InvalidConfigError(
            "invalid Redis configuration: host and port must be specified"
        )
    broker = RedisStore.connect(host, port)
    try:
        broker.ping()
    except BrokerConnectionError as exc:
        raise BrokerConnectionError(_CONNECT_FAILURE) from exc
    return broker


def get_cacher(host: str, port: int, db: int) -> RedisStore:
    """Connect to a reachable Redis cache or raise."""
    cacher = RedisStore.connect(host, port, db)
    try:
        cacher.ping()
    except BrokerConnectionError as exc:
        raise BrokerConnectionError(_CONNECT_FAILURE) from exc
    return cacher