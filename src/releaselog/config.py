"""Configuration for running releaselog against a local repository."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict

DEFAULT_CONFIG_NAME = "releaselog.json"


@dataclass(slots=True)
class HistoryConfig:
    """Runtime configuration for history extraction.

    Attributes
    ----------
    repo_path:
        Repository to read. Defaults to the current working directory.
    strip_prefix:
        Prefix dropped from a tag name before it is parsed as a semantic
        version. Only one occurrence is removed.
    log_level:
        Level name for the ``logging`` configuration set up by the CLI.
        Skipped commits and tags are reported at ``WARNING``.
    json_indent:
        Indentation used when the CLI prints JSON.
    """

    repo_path: Path = field(default_factory=Path.cwd)
    strip_prefix: str = "v"
    log_level: str = "WARNING"
    json_indent: int = 2

    def with_overrides(self, overrides: Dict[str, Any]) -> "HistoryConfig":
        """Return a copy with ``overrides`` applied.

        Raises
        ------
        ValueError
            If ``overrides`` names a setting that does not exist.
        """

        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        values = dict(overrides)
        if "repo_path" in values:
            values["repo_path"] = Path(values["repo_path"])
        return replace(self, **values)


def load_config(config_path: Path | None = None) -> HistoryConfig:
    """Load configuration overrides from a JSON file.

    Without ``config_path``, ``releaselog.json`` in the working directory is
    used when present and the defaults otherwise.

    Raises
    ------
    FileNotFoundError
        If ``config_path`` is given and does not exist.
    """

    config = HistoryConfig()
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            return config
    elif not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    with open(config_path, "r", encoding="utf-8") as f:
        overrides = json.load(f)
    if not isinstance(overrides, dict):
        raise ValueError(f"Configuration file must hold a JSON object: {config_path}")
    return config.with_overrides(overrides)

