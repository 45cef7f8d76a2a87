"""
NoteList - a local note-taking backend.
This package stores notes and categories as two flat JSON collections in a
per-user application directory and exposes them as Model Context Protocol
tools for a desktop front-end.

This version uses synchronous operations.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("notelist")
except PackageNotFoundError:
    __version__ = "0.1.0"
