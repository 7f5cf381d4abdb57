"""Output tree storage component package."""
from .filesystem import FilesystemCleaner, clean
from .interface import OutputCleaner

__all__ = [
    "OutputCleaner",
    "FilesystemCleaner",
    "clean",
]
