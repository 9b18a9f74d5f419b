# -*- coding: utf-8 -*-

import logging
from typing import Optional

import requests

log = logging.getLogger(__name__)

HEADER = "🎁 **New Legend of Mushroom codes found!**"


def build_announcement(codes, stamp: str = "") -> Optional[str]:
    """
    Message for newly added codes, or None when there is nothing to say.
    `stamp` is shown next to the header, as in "(2025-02-01 12:00)".
    """
    codes = list(codes)
    if not codes:
        return None
    header = f"{HEADER} _({stamp})_" if stamp else HEADER
    return f"{header}\n\n{', '.join(codes)}"


def post_to_discord(webhook_url: str, message: str, timeout: float = 15) -> bool:
    """
    Send `message` to a Discord webhook. Failures are logged, not raised.
    """
    if not webhook_url:
        log.warning("DISCORD_WEBHOOK_URL not set, skipping notification")
        return False
    if not message:
        return False

    try:
        r = requests.post(webhook_url, json={"content": message}, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        log.warning("Discord post failed: %s", e)
        return False
    log.info("Notification sent")
    return True
