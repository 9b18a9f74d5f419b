# -*- coding: utf-8 -*-
"""
Run configuration: file locations, webhook and the list of sources.

Values come from the environment (a local .env file is honoured) and from
the sources JSON file.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

MODE_DOCUMENT = "document"
MODE_SECTION = "section"
MODES = (MODE_DOCUMENT, MODE_SECTION)

# ---- Defaults ----
CODES_FILE = "codes.json"
MANUAL_FILE = "manual_codes.json"
BLOCKED_FILE = "blocked_codes.json"
SOURCES_FILE = "sources.json"
REQUEST_TIMEOUT = 10.0
TIMEZONE = "UTC"
USER_AGENT = ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
              "AppleWebKit/537.36 (KHTML, like Gecko)")

DEFAULT_SOURCES = [
    "https://lootbar.gg/blog/en/legend-of-mushroom-codes.html",
    "https://www.pockettactics.com/legend-of-mushroom/codes",
    "https://www.pocketgamer.com/legend-of-mushroom/codes/",
    "https://theriagames.com/guide/legend-of-mushroom-codes/",
]

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


class TrackerError(Exception):
    pass


class ConfigError(TrackerError):
    pass


@dataclass
class SourceConfig:
    url: str
    mode: str = MODE_DOCUMENT
    marker: str = ""
    stop_marker: str = "expired"
    lowercase: Optional[bool] = None
    allow_dots: Optional[bool] = None
    reject_all_digits: bool = False

    def __post_init__(self):
        if self.mode not in MODES:
            raise ConfigError(f"Unknown mode {self.mode!r} for {self.url}")
        # section pages use lower-case dotted codes
        section = self.mode == MODE_SECTION
        if self.lowercase is None:
            self.lowercase = section
        if self.allow_dots is None:
            self.allow_dots = section


@dataclass
class Config:
    codes_path: Path = Path(CODES_FILE)
    manual_path: Path = Path(MANUAL_FILE)
    blocked_path: Path = Path(BLOCKED_FILE)
    webhook_url: str = ""
    sources: List[SourceConfig] = field(default_factory=list)
    authoritative: bool = False
    timeout: float = REQUEST_TIMEOUT
    user_agent: str = USER_AGENT
    timezone: str = TIMEZONE


def parse_source(entry) -> SourceConfig:
    if isinstance(entry, str):
        return SourceConfig(url=entry)
    if not isinstance(entry, dict) or not entry.get("url"):
        raise ConfigError(f"Invalid source entry: {entry!r}")
    known = SourceConfig.__dataclass_fields__
    unknown = set(entry) - set(known)
    if unknown:
        raise ConfigError(f"Unknown source option(s) {sorted(unknown)} for {entry['url']}")
    return SourceConfig(**entry)


def load_sources(path) -> List[SourceConfig]:
    path = Path(path)
    if not path.exists():
        return [SourceConfig(url=url) for url in DEFAULT_SOURCES]
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except ValueError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e
    entries = data.get("sources") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ConfigError(f"{path} must hold a list of sources")
    return [parse_source(entry) for entry in entries]


def _get_bool(env, name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _get_float(env, name: str, default: float) -> float:
    value = env.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e


def load_config(env=None, dotenv_path: Optional[str] = None) -> Config:
    """
    Build a Config from the environment.

    When `env` is None the process environment is used, after loading
    `.env` (or `dotenv_path`) without overriding variables already set.
    """
    if env is None:
        load_dotenv(dotenv_path or ".env")
        env = os.environ

    webhook = env.get("DISCORD_WEBHOOK_URL") or env.get("DISCORD_WEBHOOK") or ""
    return Config(
        codes_path=Path(env.get("CODES_FILE", CODES_FILE)),
        manual_path=Path(env.get("MANUAL_FILE", MANUAL_FILE)),
        blocked_path=Path(env.get("BLOCKED_FILE", BLOCKED_FILE)),
        webhook_url=webhook.strip(),
        sources=load_sources(env.get("SOURCES_FILE", SOURCES_FILE)),
        authoritative=_get_bool(env, "EXPIRE_MISSING", False),
        timeout=_get_float(env, "REQUEST_TIMEOUT", REQUEST_TIMEOUT),
        timezone=env.get("TRACKER_TZ", TIMEZONE),
    )
