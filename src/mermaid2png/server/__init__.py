"""HTTP layer: a FastAPI app exposing the converter."""

from mermaid2png.server.app import create_app

__all__ = ["create_app"]
