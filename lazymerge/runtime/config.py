"""Persistent JSON config helpers.

Stores the output destination, default output file, tokenizer encoding,
listing filters, and UI theme. All access is defensive: malformed or missing
config falls back to defaults.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from ..output import OutputDestination
from ..sources import DEFAULT_EXCLUDE_GLOBS, FilterConfig, normalize_extensions
from ..tokens import DEFAULT_TOKEN_ENCODING

APP_NAME = "lazymerge"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_OUTPUT_PATH = "merged.md"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write errors are ignored so an unwritable config dir never breaks a run.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _load_bool(key: str, default: bool) -> bool:
    value = load_config().get(key)
    return value if isinstance(value, bool) else default


def _load_str(key: str, default: str) -> str:
    value = load_config().get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def load_destination() -> OutputDestination:
    """Return the remembered output destination (``FILE`` when unset)."""
    return OutputDestination.parse(load_config().get("destination"))


def save_destination(destination: OutputDestination) -> None:
    config = load_config()
    config["destination"] = destination.value
    save_config(config)


def load_output_path() -> str:
    return _load_str("output_path", DEFAULT_OUTPUT_PATH)


def load_token_encoding() -> str:
    return _load_str("token_encoding", DEFAULT_TOKEN_ENCODING)


def load_theme_name() -> str | None:
    value = load_config().get("theme")
    return value if isinstance(value, str) and value.strip() else None


def load_exclude_globs() -> tuple[str, ...]:
    """Return configured exclude patterns; only a list of strings is accepted."""
    value = load_config().get("exclude_globs")
    if not isinstance(value, list):
        return DEFAULT_EXCLUDE_GLOBS
    return tuple(item for item in value if isinstance(item, str) and item.strip())


def load_include_hidden() -> bool:
    return _load_bool("include_hidden", False)


def load_respect_gitignore() -> bool:
    return _load_bool("respect_gitignore", True)


def load_max_file_size() -> int | None:
    """Return a positive byte limit, or ``None`` for unlimited."""
    value = load_config().get("max_file_size")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return None
    return value


def filter_config_from(
    extensions: object = None,
    exclude_globs: object = None,
    include_hidden: bool | None = None,
    respect_gitignore: bool | None = None,
) -> FilterConfig:
    """Build a ``FilterConfig`` from CLI overrides layered over saved config.

    ``None`` means "not given on the command line" for every argument.
    """
    excludes = load_exclude_globs()
    if isinstance(exclude_globs, (list, tuple)):
        excludes = excludes + tuple(item for item in exclude_globs if isinstance(item, str) and item.strip())
    return FilterConfig(
        extensions=normalize_extensions(extensions),
        exclude_globs=excludes,
        include_hidden=load_include_hidden() if include_hidden is None else bool(include_hidden),
        respect_gitignore=load_respect_gitignore() if respect_gitignore is None else bool(respect_gitignore),
        max_file_size=load_max_file_size(),
    )
