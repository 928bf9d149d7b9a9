"""Werkzeug-based responses, validation, auth, rate limiting, middleware and handlers for a speech-to-text HTTP API."""

__version__ = "0.1.0"