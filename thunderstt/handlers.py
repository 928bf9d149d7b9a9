"""Model listing and version endpoints, and PCM frame decoding for streaming."""

from __future__ import annotations

import platform
import struct
from dataclasses import dataclass

from werkzeug.wrappers import Request, Response

from thunderstt.response import json_response


@dataclass(frozen=True)
class ModelObject:
    """One entry of the OpenAI-compatible model list."""

    id: str
    object: str
    owned_by: str


AVAILABLE_MODELS: tuple[ModelObject, ...] = (
    ModelObject("parakeet-tdt-0.6b-v3", "model", "nvidia"),
    ModelObject("whisper-large-v3-turbo", "model", "openai"),
    ModelObject("whisper-large-v3", "model", "openai"),
    ModelObject("whisper-large-v2", "model", "openai"),
    ModelObject("whisper-medium", "model", "openai"),
    ModelObject("whisper-small", "model", "openai"),
    ModelObject("whisper-base", "model", "openai"),
    ModelObject("whisper-tiny", "model", "openai"),
)


@dataclass
class _VersionInfo:
    version: str = "dev"
    commit: str = "none"
    build_date: str = "unknown"


_version_info = _VersionInfo()


def handle_list_models(request: Request) -> Response:
    """Return the advertised models in the OpenAI list format."""
    return json_response(200, {"object": "list", "data": list(AVAILABLE_MODELS)})


def set_version_info(version: str, commit: str, build_date: str) -> None:
    """Record build version information reported by the version endpoint."""
    _version_info.version = version
    _version_info.commit = commit
    _version_info.build_date = build_date


def handle_version(request: Request) -> Response:
    """Return build and runtime version information."""
    body = {"version": _version_info.version}
    if _version_info.commit:
        body["commit"] = _version_info.commit
    if _version_info.build_date:
        body["build_date"] = _version_info.build_date
    body["python_version"] = platform.python_version()
    body["os"] = platform.system().lower()
    body["arch"] = platform.machine()
    return json_response(200, body)


def bytes_to_float32(data: bytes) -> list[float]:
    """Decode little-endian IEEE 754 float32 samples; trailing partial bytes are ignored."""
    count = len(data) // 4
    if count == 0:
        return []
    return list(struct.unpack(f"<{count}f", data[: count * 4]))