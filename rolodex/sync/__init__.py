"""
Runs the contact import: detect changes, tag them, and store the result

File: sync/__init__.py
Created: 2026-10-14
"""

from .importer import FileLock, import_contacts, run_import

__all__ = [
    "FileLock",
    "import_contacts",
    "run_import",
]
