"""ecosystem-book: map a package ecosystem from a registry index and publish it as a book."""

__version__ = "0.1.0"
