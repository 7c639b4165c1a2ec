"""Query API for indexes and closures."""

from ecosystem_book.web.app import create_app

__all__ = ["create_app"]
