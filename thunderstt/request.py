"""Parsing and validation of multipart transcription requests."""

from __future__ import annotations

from dataclasses import dataclass, field

from werkzeug.datastructures import FileStorage
from werkzeug.wrappers import Request

FORMAT_JSON = "json"
VALID_FORMATS = frozenset({"json", "verbose_json", "text", "srt", "vtt"})

KNOWN_MODELS = frozenset(
    {
        "auto",
        "whisper-large-v3-turbo",
        "whisper-large-v3",
        "whisper-large-v2",
        "whisper-medium",
        "whisper-small",
        "whisper-base",
        "whisper-tiny",
        "parakeet-tdt-0.6b-v3",
    }
)

VALID_TIMESTAMP_GRANULARITIES = frozenset({"word", "segment"})


class RequestError(ValueError):
    """Raised when a transcription request is missing or has invalid fields."""


@dataclass
class TranscribeRequest:
    """Validated fields of a transcription request."""

    file: FileStorage | None = None
    model: str = "auto"
    language: str = ""
    response_format: str = FORMAT_JSON
    timestamp_granularities: list[str] = field(default_factory=list)

    @property
    def filename(self) -> str:
        return (self.file.filename or "") if self.file is not None else ""

    def wants_word_timestamps(self) -> bool:
        """True if "word" is among the requested timestamp granularities."""
        return "word" in self.timestamp_granularities


def is_valid_format(name: str) -> bool:
    """True if name is a supported response format."""
    return name in VALID_FORMATS


def parse_transcribe_request(request: Request) -> TranscribeRequest:
    """Extract and validate the fields of a multipart transcription request."""
    upload = request.files.get("file")
    if upload is None:
        raise RequestError('missing required field "file": no such file')

    model = request.form.get("model", "").strip() or "auto"
    if model not in KNOWN_MODELS:
        upload.close()
        raise RequestError(f'unknown model "{model}"; see GET /v1/models for available models')

    language = request.form.get("language", "").strip()

    response_format = request.form.get("response_format", "").strip() or FORMAT_JSON
    if not is_valid_format(response_format):
        upload.close()
        raise RequestError(
            f'invalid response_format "{response_format}"; '
            "must be one of: json, verbose_json, text, srt, vtt"
        )

    granularities: list[str] = []
    for raw in request.form.getlist("timestamp_granularities[]"):
        value = raw.strip()
        if not value:
            continue
        if value not in VALID_TIMESTAMP_GRANULARITIES:
            upload.close()
            raise RequestError(
                f'invalid timestamp_granularities value "{value}"; must be "word" or "segment"'
            )
        granularities.append(value)

    return TranscribeRequest(
        file=upload,
        model=model,
        language=language,
        response_format=response_format,
        timestamp_granularities=granularities,
    )