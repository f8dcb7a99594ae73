import queue
from datetime import timedelta
from unittest.mock import patch

import pytest
import redis

from download_list.errors import BrokerConnectionError, InvalidConfigError
from download_list.messages import BrokerConfig, Message
from download_list.redis_store import RedisStore, get_broker, get_cacher


class _Stop(Exception):
    pass


class FakeRedis:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.data = {}
        self.lists = {}
        self.set_calls = []
        self.blpop_errors = 0

    def ping(self):
        return True

    def lpush(self, name, *values):
        for value in values:
            self.lists.setdefault(name, []).insert(0, value)

    def blpop(self, keys, timeout=0):
        if self.blpop_errors:
            self.blpop_errors -= 1
            raise redis.exceptions.ConnectionError("lost")
        for key in keys:
            if self.lists.get(key):
                return (key.encode(), self.lists[key].pop(0))
        raise _Stop()

    def get(self, name):
        return self.data.get(name)

    def set(self, name, value, px=None):
        self.set_calls.append((name, value, px))
        self.data[name] = value.encode() if isinstance(value, str) else value

    def exists(self, *names):
        return sum(1 for name in names if name in self.data)

    def delete(self, *names):
        for name in names:
            self.data.pop(name, None)

    def keys(self, pattern="*"):
        return [name.encode() for name in self.data]


class DownRedis(FakeRedis):
    def ping(self):
        raise redis.exceptions.ConnectionError("refused")


class BrokenExistsRedis(FakeRedis):
    def exists(self, *names):
        raise redis.exceptions.ConnectionError("refused")


@pytest.fixture
def store():
    return RedisStore(FakeRedis())


def test_publish_then_listen_delivers_message(store):
    sent = Message(topic="jobs", value=b'{"url":"u"}')
    store.publish(sent)
    out = queue.Queue()
    with pytest.raises(_Stop):
        store.listen_to_queue(BrokerConfig(topic=["jobs"]), out)
    assert out.get_nowait() == sent


def test_listen_continues_after_redis_error(capsys):
    client = FakeRedis()
    client.blpop_errors = 1
    store = RedisStore(client)
    store.publish(Message(topic="jobs", value=b"x"))
    out = queue.Queue()
    with pytest.raises(_Stop):
        store.listen_to_queue(BrokerConfig(topic=["jobs"]), out)
    assert out.get_nowait().value == b"x"
    assert "Erro ao ler item da fila:" in capsys.readouterr().out


def test_listen_pushes_empty_message_for_garbage(store):
    store._client.lists["jobs"] = [b"not json"]
    out = queue.Queue()
    with pytest.raises(_Stop):
        store.listen_to_queue(BrokerConfig(topic=["jobs"]), out)
    assert out.get_nowait() == Message()


@pytest.mark.parametrize("config", [None, BrokerConfig()])
def test_listen_rejects_missing_config(store, config):
    with pytest.raises(InvalidConfigError):
        store.listen_to_queue(config, queue.Queue())


def test_set_get_exists_delete_keys(store):
    store.set("a", "1", 0)
    assert store.get("a") == "1"
    assert store.exists("a") is True
    assert store.keys() == ["a"]
    store.delete("a")
    assert store.exists("a") is False
    assert store.keys() == []


def test_get_missing_key_raises(store):
    with pytest.raises(KeyError):
        store.get("missing")


def test_set_with_expiration_passes_milliseconds(store):
    store.set("a", "1", timedelta(seconds=5))
    store.set("b", "2", 2)
    store.set("c", "3", None)
    calls = store._client.set_calls
    assert calls[0][2] == timedelta(seconds=5)
    assert calls[1][2] == timedelta(seconds=2)
    assert calls[2][2] is None


def test_exists_is_false_on_error():
    assert RedisStore(BrokenExistsRedis()).exists("a") is False


def test_ping_wraps_errors():
    with pytest.raises(BrokerConnectionError):
        RedisStore(DownRedis()).ping()


@pytest.mark.parametrize("host, port", [("", 6379), ("localhost", 0)])
def test_get_broker_validates_configuration(host, port):
    with pytest.raises(InvalidConfigError, match="host and port must be specified"):
        get_broker(host, port)


def test_get_broker_connects_with_address():
    with patch("redis.Redis", FakeRedis):
        broker = get_broker("localhost", 6379)
    assert broker._client.kwargs == {"host": "localhost", "port": 6379, "db": 0}


def test_get_broker_reports_unreachable_server():
    with patch("redis.Redis", DownRedis):
        with pytest.raises(BrokerConnectionError, match="failed to connect to Redis"):
            get_broker("localhost", 6379)


def test_get_cacher_uses_database():
    with patch("redis.Redis", FakeRedis):
        cacher = get_cacher("localhost", 6379, 3)
    assert cacher._client.kwargs["db"] == 3


def test_get_cacher_reports_unreachable_server():
    with patch("redis.Redis", DownRedis):
        with pytest.raises(BrokerConnectionError):
            get_cacher("localhost", 6379, 0)