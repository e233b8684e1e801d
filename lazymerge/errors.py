"""Exception types shared by sources, tokenizer, and output sinks.

Each failure family maps to one recovery rule in the controller:
- TextSourceError: source unavailable or one file could not be fetched.
- TokenCountError: tokenizer rejected content or could not be loaded.
- MergeError: the merged artifact could not be produced or written.
- ClipboardError: the clipboard sink refused the payload.
"""

from __future__ import annotations


class LazyMergeError(Exception):
    """Base class for all recoverable lazymerge failures."""


class TextSourceError(LazyMergeError):
    """Raised when a text source cannot be opened, listed, or read."""


class TokenCountError(LazyMergeError):
    """Raised when token counting fails for otherwise valid content."""


class MergeError(LazyMergeError):
    """Raised when a merge cannot complete.

    Any constituent file failure fails the whole artifact.
    """


class ClipboardError(LazyMergeError):
    """Raised when copying text to the system clipboard fails."""


__all__ = [
    "ClipboardError",
    "LazyMergeError",
    "MergeError",
    "TextSourceError",
    "TokenCountError",
]
