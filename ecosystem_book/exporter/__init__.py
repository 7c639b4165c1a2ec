"""Exporter layer."""

from ecosystem_book.exporter.book_writer import write_book
from ecosystem_book.exporter.manifest_generator import generate_manifest

__all__ = ["write_book", "generate_manifest"]
