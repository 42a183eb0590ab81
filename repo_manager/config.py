"""Configuration constants and the user config file (token, label sets)."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

API = "https://api.github.com"
USER_AGENT = "repo-manager"
DEFAULT_PER_PAGE = 100

RATE_LIMIT_PATTERN = re.compile(r"rate limit exceeded", re.IGNORECASE)
VALIDATION_PATTERN = re.compile(r"Validation Failed")

# Label colors are six hex digits without the leading "#"
LABEL_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")

CONFIG_PATH = Path.home() / ".repo_manager" / "config.json"
CONFIG_ENV = "REPO_MANAGER_CONFIG"
TOKEN_ENVS = ("GITHUB_TOKEN", "GH_TOKEN")


class ConfigError(ValueError):
    pass


@dataclass
class Settings:
    """Contents of the config file.

    The file mirrors ``{"github": {"token": ..., "labelSets": {key: {label: color}}}}``.
    """

    token: str | None = None
    label_sets: dict[str, dict[str, str]] = field(default_factory=dict)
    path: Path | None = None

    def label_set(self, key: str | None) -> dict[str, str]:
        if not key:
            raise ConfigError("You must enter a key for a label set defined in the config file")
        labels = self.label_sets.get(key)
        if not labels:
            known = ", ".join(sorted(self.label_sets)) or "none configured"
            raise ConfigError(f"Unknown label set {key!r} (known: {known})")
        return labels


def _validate_label_sets(raw: object) -> dict[str, dict[str, str]]:
    if not isinstance(raw, dict):
        raise ConfigError("labelSets must be an object of {key: {label: color}}")
    label_sets: dict[str, dict[str, str]] = {}
    for key, labels in raw.items():
        if not isinstance(labels, dict):
            raise ConfigError(f"Label set {key!r} must map label names to colors")
        for name, color in labels.items():
            if not isinstance(color, str) or not LABEL_COLOR.match(color):
                raise ConfigError(
                    f"Label {name!r} in set {key!r} has invalid color {color!r} "
                    "(expected 6 hex digits without '#')"
                )
        label_sets[key] = dict(labels)
    return label_sets


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from ``path``, $REPO_MANAGER_CONFIG or the default location.

    A missing default file yields empty settings; a missing explicit file is an error.
    """
    explicit = path or os.environ.get(CONFIG_ENV)
    config_path = Path(explicit) if explicit else CONFIG_PATH
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        return Settings()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not read config file {config_path}: {exc}") from exc

    github = data.get("github") if isinstance(data, dict) else None
    if not isinstance(github, dict):
        raise ConfigError(f"Config file {config_path} has no \"github\" section")
    return Settings(
        token=github.get("token") or None,
        label_sets=_validate_label_sets(github.get("labelSets", {})),
        path=config_path,
    )


def resolve_token(cli_token: str | None, settings: Settings) -> str | None:
    """CLI argument > GITHUB_TOKEN > GH_TOKEN > config file."""
    if cli_token:
        return cli_token
    for env in TOKEN_ENVS:
        tok = os.environ.get(env)
        if tok:
            return tok
    return settings.token
