# thunderstt

Building blocks for the HTTP layer of an OpenAI-compatible speech-to-text
server. Handlers are plain callables that take a Werkzeug `Request` and return
a Werkzeug `Response`; each middleware takes such a handler and returns a new
one.

## Modules

- `thunderstt.response`
  - `json_response(status, data)` serialises data (dataclasses included) as
    JSON with `Content-Type: application/json; charset=utf-8`.
  - `error_response`, `error_response_with_code` and
    `error_response_for_request` build `{"error": {...}}` bodies with
    `message`, `type`, and optionally `code` and `request_id`.
  - `error_type_for_status(status)` maps a status to an error type
    (`invalid_request_error` for 400 and 413, `authentication_error`,
    `permission_error`, `not_found_error`, `rate_limit_error`, `server_error`
    for 5xx, `api_error` otherwise).
  - `bytes_response(status, content_type, data)` returns raw data.
  - `get_request_id` / `set_request_id` keep a request ID in the WSGI environ.
- `thunderstt.validation`
  - `validate_audio_filename(filename)` accepts `.wav .mp3 .flac .ogg .m4a
    .webm .aac .wma .opus` (case-insensitive).
  - `validate_audio_magic_bytes(stream)` reads up to 12 bytes and returns the
    detected format (`wav`, `mp3`, `flac`, `ogg`, `m4a` or `unknown`) together
    with the bytes read. Fewer than 4 bytes is an error.
  - Both raise `AudioValidationError`.
- `thunderstt.request`
  - `parse_transcribe_request(request)` reads the `file`, `model`,
    `language`, `response_format` and `timestamp_granularities[]` form fields
    into a `TranscribeRequest`. The model defaults to `auto`, the format to
    `json`; unknown models, formats or granularities raise `RequestError`.
  - `TranscribeRequest.wants_word_timestamps()` tells whether `word`
    granularity was asked for.
  - `is_valid_format(name)` accepts `json`, `verbose_json`, `text`, `srt`,
    `vtt`.
- `thunderstt.auth` – `bearer_auth(api_key)` requires `Authorization: Bearer
  <key>` (or `bearer <key>`) and answers 401 otherwise. `/health`, `/ready` and
  `/metrics` are exempt; an empty key turns the check off.
- `thunderstt.ratelimit` – `RateLimiter(rate, burst)` is a per-IP token
  bucket with `allow(ip)` and `purge()`; idle clients are forgotten after five
  minutes. `rate_limit(rate, burst)` is the middleware form and answers 429
  with `Retry-After: 1`. `client_ip(remote_addr)` strips a trailing port.
- `thunderstt.middleware`
  - `request_id` reuses an incoming `X-Request-ID` or makes one with
    `new_uuid()`, and echoes it in the response.
  - `logging_middleware` logs each request through the standard `logging`
    module at INFO, WARNING (4xx) or ERROR (5xx).
  - `recovery` turns an unhandled exception into a 500 error response.
  - `cors` sets permissive CORS headers and answers `OPTIONS` with 204.
  - `max_body_size(max_bytes)` answers 413 when the body is read past the
    limit; it must run before anything reads the body.
  - `request_timeout(seconds)` answers 503 when the handler runs too long.
  - `chain(handler, *middlewares)` stacks them, first one outermost.
- `thunderstt.handlers`
  - `handle_list_models` returns the advertised models as an OpenAI list.
  - `handle_version` returns the values given to `set_version_info` together
    with the Python version, OS and machine architecture.
  - `bytes_to_float32(data)` decodes little-endian float32 PCM samples,
    ignoring trailing partial bytes.

## Install

```
pip install .
pip install ".[test]"   # with the test tools
```

## Example

```python
from werkzeug.wrappers import Request

from thunderstt.auth import bearer_auth
from thunderstt.handlers import handle_list_models
from thunderstt.middleware import chain, cors, recovery, request_id
from thunderstt.ratelimit import rate_limit

handler = chain(
    handle_list_models,
    request_id,
    recovery,
    cors,
    bearer_auth("placeholder"),
    rate_limit(100, 200),
)

response = handler(
    Request.from_values("/v1/models", headers={"Authorization": "Bearer placeholder"})
)
print(response.status_code, response.get_json()["object"])
```

## What this package does not do

It has no server and no command to start one, no router, and no speech
recognition: there are no transcription, translation, health, readiness or
metrics handlers, and no WebSocket streaming endpoint – only the
`bytes_to_float32` helper for decoding streamed PCM frames. Wiring these pieces
into a WSGI application and supplying a transcription engine is left to the
caller.

## Tests

```
pytest
```