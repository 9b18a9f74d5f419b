# -*- coding: utf-8 -*-
"""
One tracker run: fetch every source, extract codes, reconcile against the
stored codes, persist, announce.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Callable, Dict, List, Optional, Set, Tuple
from urllib.parse import urlparse

from dateutil import tz
from dateutil.parser import isoparse

from .config import Config, ConfigError
from .extract import extract_codes, parse_html
from .fetch import fetch_html
from .notify import build_announcement, post_to_discord
from .reconcile import add_page, reconcile
from .store import load_codes, load_list, save_codes

log = logging.getLogger(__name__)


@dataclass
class RunResult:
    found: int = 0
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    notified: bool = False


def current_timestamp(timezone: str) -> str:
    zone = tz.gettz(timezone)
    if zone is None:
        raise ConfigError(f"Unknown timezone {timezone!r}")
    return datetime.now(zone).isoformat(timespec="seconds")


def header_stamp(now: str) -> str:
    """Run time for the announcement header, in the run's own zone."""
    return isoparse(now).strftime("%Y-%m-%d %H:%M")


def collect_codes(sources, fetch: Callable[[str], Optional[str]]
                  ) -> Tuple[Dict[str, Set[str]], List[str]]:
    """
    Run every source through fetch -> parse -> extract.

    Returns the run aggregate (code -> urls) and the urls that could not
    be fetched.
    """
    aggregate = {}
    failed = []
    for source in sources:
        host = urlparse(source.url).netloc or source.url
        log.info("Processing %s", source.url)
        markup = fetch(source.url)
        if markup is None:
            failed.append(source.url)
            continue

        codes = extract_codes(parse_html(markup), source)
        if codes:
            log.info("  %s: %d candidate code(s)", host, len(codes))
        else:
            log.info("  %s: no codes found", host)
        add_page(aggregate, codes, source.url)
    return aggregate, failed


def run(config: Config, fetch=None, notify=None, now: Optional[str] = None) -> RunResult:
    if fetch is None:
        fetch = partial(fetch_html, timeout=config.timeout, user_agent=config.user_agent)
    if notify is None:
        notify = partial(post_to_discord, config.webhook_url)
    if now is None:
        now = current_timestamp(config.timezone)

    prior = load_codes(config.codes_path)
    manual = load_list(config.manual_path)
    blocked = load_list(config.blocked_path)
    log.info("Stored codes: %d (manual %d, blocked %d)", len(prior), len(manual), len(blocked))

    aggregate, failed = collect_codes(config.sources, fetch)
    log.info("Codes found this run: %d", len(aggregate))

    expire = config.authoritative and not failed
    if config.authoritative and failed:
        log.info("Skipping expiry, %d source(s) unreachable", len(failed))

    result = reconcile(prior, aggregate, manual, blocked, now, expire=expire)
    if result.added:
        log.info("New codes: %s", ", ".join(result.added))
    else:
        log.info("No new codes found")
    if result.removed:
        log.info("Removed codes: %s", ", ".join(result.removed))

    save_codes(config.codes_path, result.store)

    notified = False
    message = build_announcement(result.added, header_stamp(now))
    if message:
        notified = bool(notify(message))

    return RunResult(
        found=len(aggregate),
        added=result.added,
        removed=result.removed,
        failed=failed,
        notified=notified,
    )
