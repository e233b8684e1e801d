"""Token counting backed by ``tiktoken`` encodings."""

from __future__ import annotations

import threading
from typing import Any

import tiktoken

from .errors import TokenCountError

DEFAULT_TOKEN_ENCODING = "cl100k_base"

_ENCODER_CACHE: dict[str, Any] = {}
_ENCODER_LOCK = threading.Lock()


def clear_encoder_cache() -> None:
    """Forget loaded encoders."""
    with _ENCODER_LOCK:
        _ENCODER_CACHE.clear()


def get_encoder(encoding: str = DEFAULT_TOKEN_ENCODING) -> Any:
    """Return a cached tiktoken encoder, loading it on first use.

    Loading may download BPE ranks, so it happens lazily on a worker thread
    rather than at startup.
    """
    with _ENCODER_LOCK:
        cached = _ENCODER_CACHE.get(encoding)
        if cached is not None:
            return cached
        try:
            encoder = tiktoken.get_encoding(encoding)
        except Exception as exc:
            raise TokenCountError(f"cannot load token encoding {encoding!r}: {exc}") from exc
        _ENCODER_CACHE[encoding] = encoder
        return encoder


def count_tokens(content: str, encoding: str = DEFAULT_TOKEN_ENCODING) -> int:
    """Return the number of tokens in ``content``.

    Special-token markers inside source files are counted as plain text.
    """
    encoder = get_encoder(encoding)
    try:
        return len(encoder.encode(content, disallowed_special=()))
    except Exception as exc:
        raise TokenCountError(f"tokenizer failed: {exc}") from exc
