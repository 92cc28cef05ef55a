"""HTTP service exposing plan and generate runs."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
