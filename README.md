# download_list

A small HTTP service that accepts lists of media URLs, queues them in Redis,
and downloads each one with `yt-dlp` in the background.

## How it works

1. A client sends `POST /midia` with a JSON body:

   ```json
   {"urls": ["https://media.example.com/watch?v=abc"], "audio": false, "quality": true}
   ```

   All three fields are optional; `urls` must be a list of strings and
   `audio` and `quality` must be booleans.

2. Each URL is published to a Redis list (the configured `BROKER_TOPIC`) as
   its own message.
3. Eight worker threads take messages off the queue and run `yt-dlp`:
   - `audio: true` downloads the best audio stream to `<title>.mp3`;
   - otherwise `quality: true` downloads the best video and audio streams
     to `<title>`;
   - otherwise an `mp4` is downloaded to `<title>.mp4`.

   The target directory is `DOWNLOAD_PATH` (created if missing). The title
   comes from `yt-dlp --get-title`, sanitized for use as a file name, or
   `video-title` if it cannot be fetched.

The endpoint answers:

| Status | Body                          | When                                      |
|--------|-------------------------------|-------------------------------------------|
| `200`  | `"URL posted successfully"`   | every URL was queued (or none were given) |
| `400`  | `"Invalid request"`           | the body is not valid JSON of that shape  |
| `500`  | `"Internal server error"`     | at least one URL could not be published   |

## Requirements

- A reachable Redis server; the command refuses to start otherwise.
- `yt-dlp` on the `PATH`.

## Installation

```sh
pip install .
```

## Configuration

Settings are read from a dotenv file (`.env` in the working directory by
default), which must exist. Variables already set in the process
environment take precedence over the file. Integer settings that are not
integers are reported as an error.

| Variable          | Meaning                                          |
|-------------------|--------------------------------------------------|
| `WEB_PORT`        | Address to listen on, `host:port` or `:port`     |
| `BROKER_HOST`     | Redis host                                       |
| `BROKER_PORT`     | Redis port                                       |
| `BROKER_TOPIC`    | Redis list used as the download queue            |
| `LOG_PATTERN`     | Prefix of the daily log file in `logs/`          |
| `DOWNLOAD_PATH`   | Directory downloads are written to               |
| `BROKER_DB`       | Parsed into `Environment.broker_db`              |
| `BROKER_KIND`     | Parsed into `Environment.broker_kind`            |
| `TIME_SLEEP`      | Parsed into `Environment.time_sleep`             |
| `REPOSITORY_KIND` | Parsed into `Environment.repository_kind`        |
| `REPOSITORY_FILE` | Parsed into `Environment.repository_file`        |

With `:port` the server listens on all interfaces (`0.0.0.0`).

Example `.env`:

```
WEB_PORT=:8080
BROKER_HOST=localhost
BROKER_PORT=6379
BROKER_TOPIC=downloads
LOG_PATTERN=download_list
DOWNLOAD_PATH=./downloads
```

## Running

```sh
download-list
download-list --env-file /path/to/settings.env
```

The command runs until interrupted (Ctrl+C) and exits with status 1 if the
settings, the log file or the Redis connection cannot be set up. The HTTP
server is Flask's built-in server.

Logs go to `logs/<LOG_PATTERN>-<YYYY-MM-DD>.log` as JSON lines with
`level`, `ts`, `caller` and `msg` fields; messages at info level and above
are written.

## Using it as a library

```python
from download_list.text import sanitize
from download_list.youtube import DownloadInput, download

print(sanitize('a/b:c?'))  # a_b_c_

download(DownloadInput(url="https://media.example.com/watch?v=abc",
                       path="./downloads", kind="A", quality="N"))
```

Other pieces:

- `download_list.config` — `Environment`, `load_environment()`.
- `download_list.dto` — `Request` (the HTTP body) and `MessageListen`
  (one queued job).
- `download_list.messages` — `Message`, `Header`, `BrokerConfig` and the
  abstract `Broker` and `Cacher` interfaces.
- `download_list.redis_store` — `RedisStore`, implementing both, plus
  `get_broker(host, port)` and `get_cacher(host, port, db)`, which check the
  connection before returning.
- `download_list.usecase` — `MediaUseCase.post_urls()`, which publishes one
  message per URL and returns the errors it met.
- `download_list.web` — `WebServer`, `create_media_handler()`,
  `new_web_server()`.
- `download_list.service` — `MediaService` and `new_media_service()`.
- `download_list.logger` — `Logger`, `new_logger()`, `create_log_file()`.

## Limits

- The service always uses Redis database 0 for its queue; `BROKER_DB`,
  `BROKER_KIND`, `TIME_SLEEP`, `REPOSITORY_KIND` and `REPOSITORY_FILE` are
  read but the service does nothing with them.
- There is no endpoint to see the progress or result of a download; failures
  are only written to the log.
- Jobs are not retried, and jobs still queued in memory when the command
  stops are lost.

## Tests

```sh
pip install ".[test]"
pytest
```