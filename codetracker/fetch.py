# -*- coding: utf-8 -*-

import logging
from typing import Optional

import requests

from .config import REQUEST_TIMEOUT, USER_AGENT

log = logging.getLogger(__name__)


def fetch_html(url: str, timeout: float = REQUEST_TIMEOUT,
               user_agent: str = USER_AGENT) -> Optional[str]:
    """Page markup, or None if the page could not be fetched."""
    headers = {"User-Agent": user_agent}
    try:
        r = requests.get(url, headers=headers, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        log.warning("Source unreachable: %s (%s)", url, e)
        return None
    return r.text
