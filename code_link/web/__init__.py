"""HTTP API (requires the ``web`` extra)."""

from code_link.web.app import create_app

__all__ = ["create_app"]
