import pytest

from download_list.config import Environment, load_environment
from download_list.errors import InvalidConfigError

KEYS = [
    "WEB_PORT", "BROKER_HOST", "BROKER_PORT", "BROKER_TOPIC", "BROKER_DB",
    "LOG_PATTERN", "BROKER_KIND", "TIME_SLEEP", "REPOSITORY_KIND",
    "REPOSITORY_FILE", "DOWNLOAD_PATH",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_from_mapping_reads_all_fields():
    env = Environment.from_mapping({
        "WEB_PORT": ":8080",
        "BROKER_HOST": "localhost",
        "BROKER_PORT": "6379",
        "BROKER_TOPIC": "midia",
        "BROKER_DB": "2",
        "LOG_PATTERN": "app",
        "DOWNLOAD_PATH": "/tmp/downloads",
    })
    assert env.web_port == ":8080"
    assert env.broker_host == "localhost"
    assert env.broker_port == 6379
    assert env.broker_topic == "midia"
    assert env.broker_db == 2
    assert env.log_pattern == "app"
    assert env.download_path == "/tmp/downloads"


def test_from_mapping_empty_gives_defaults():
    assert Environment.from_mapping({}) == Environment()


def test_from_mapping_rejects_non_integer_port():
    with pytest.raises(InvalidConfigError):
        Environment.from_mapping({"BROKER_PORT": "abc"})


def test_from_mapping_rejects_empty_integer():
    with pytest.raises(InvalidConfigError):
        Environment.from_mapping({"TIME_SLEEP": ""})


def test_load_environment_from_file(tmp_path, clean_env):
    dotenv = tmp_path / ".env"
    dotenv.write_text("WEB_PORT=:8080\nBROKER_PORT=6379\nBROKER_TOPIC=midia\n")
    env = load_environment(dotenv)
    assert env.web_port == ":8080"
    assert env.broker_port == 6379
    assert env.broker_topic == "midia"


def test_process_environment_takes_precedence(tmp_path, clean_env):
    dotenv = tmp_path / ".env"
    dotenv.write_text("WEB_PORT=:8080\n")
    clean_env.setenv("WEB_PORT", ":9000")
    assert load_environment(dotenv).web_port == ":9000"


def test_missing_dotenv_raises(tmp_path, clean_env):
    with pytest.raises(InvalidConfigError):
        load_environment(tmp_path / "absent.env")