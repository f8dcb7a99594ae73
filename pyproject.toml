[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "download_list"
version = "0.1.0"
description = "HTTP service that queues media URLs in Redis and downloads them with yt-dlp"
requires-python = ">=3.10"
keywords = ["yt-dlp", "download", "redis", "queue", "http", "media"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Multimedia :: Video",
]
dependencies = [
    "redis",
    "python-dotenv",
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
download-list = "download_list.main:main"

[tool.hatch.build.targets.wheel]
packages = ["download_list"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]
