"""Checks on uploaded audio: file extension and magic bytes."""

from __future__ import annotations

from typing import BinaryIO

ALLOWED_AUDIO_EXTENSIONS = frozenset(
    {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".webm", ".aac", ".wma", ".opus"}
)

_AUDIO_MAGIC_BYTES: tuple[tuple[bytes, str], ...] = (
    (b"RIFF", "wav"),
    (b"ID3", "mp3"),
    (b"\xff\xfb", "mp3"),
    (b"\xff\xf3", "mp3"),
    (b"\xff\xf2", "mp3"),
    (b"fLaC", "flac"),
    (b"OggS", "ogg"),
    (b"\x00\x00\x00", "m4a"),  # partial ftyp box
)

_HEADER_SIZE = 12
_MIN_HEADER = 4


class AudioValidationError(ValueError):
    """Raised when an uploaded file does not look like acceptable audio."""


def validate_audio_filename(filename: str) -> None:
    """Raise AudioValidationError unless the filename has an allowed audio extension."""
    idx = filename.rfind(".")
    if idx < 0:
        raise AudioValidationError(
            "file has no extension; supported formats: wav, mp3, flac, ogg, m4a, webm"
        )
    ext = filename[idx:].lower()
    if ext not in ALLOWED_AUDIO_EXTENSIONS:
        raise AudioValidationError(
            f'unsupported file extension "{ext}"; supported: wav, mp3, flac, ogg, m4a, webm, aac, opus'
        )


def validate_audio_magic_bytes(stream: BinaryIO) -> tuple[str, bytes]:
    """Read the start of a stream and detect the audio format from its magic bytes.

    Returns the format name ("unknown" if unrecognised) and the bytes read.
    """
    header = b""
    while len(header) < _HEADER_SIZE:
        chunk = stream.read(_HEADER_SIZE - len(header))
        if not chunk:
            break
        header += chunk
    if len(header) < _MIN_HEADER:
        raise AudioValidationError("failed to read file header: unexpected EOF")

    for prefix, name in _AUDIO_MAGIC_BYTES:
        if header.startswith(prefix):
            return name, header
    return "unknown", header