"""One-way periodic mirroring of a source directory tree onto a replica."""

__version__ = "1.0.0"
