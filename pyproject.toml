[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "thunderstt"
version = "0.1.0"
description = "HTTP API building blocks for an OpenAI-compatible speech-to-text server: request parsing, validation, auth, rate limiting and middleware on Werkzeug."
requires-python = ">=3.10"
keywords = ["speech-to-text", "transcription", "openai", "wsgi", "werkzeug", "middleware", "rate-limit"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Multimedia :: Sound/Audio :: Speech",
]
dependencies = [
    "werkzeug",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["thunderstt"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
