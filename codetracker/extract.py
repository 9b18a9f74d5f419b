# -*- coding: utf-8 -*-
"""
Candidate extraction from parsed code pages.

Two strategies, picked per source:

- document: look at every element that usually holds a short bold/listed
  token, falling back to the full body text when nothing matched.
- section: only read the siblings between a "working codes" heading and the
  next block that mentions expired codes.
"""

import logging
import re

from bs4 import BeautifulSoup

from .config import MODE_SECTION
from .filters import is_valid_code

log = logging.getLogger(__name__)

# Elements that hold the code itself on most guide pages
CANDIDATE_TAGS = ["strong", "b", "em", "li", "code", "p"]
# Generic blocks are read only when no other block sits inside them
LEAF_BLOCK_TAGS = ["div", "td", "dd"]
BLOCK_TAGS = ["div", "p", "ul", "ol", "li", "table", "section", "article",
              "h1", "h2", "h3", "h4", "h5", "h6"]
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
JUNK_TAGS = ["script", "style", "noscript"]

PAREN_RE = re.compile(r"\s*\([^)]*\)")
# Reward descriptions follow a hyphen, dash or colon
TRUNCATE_RE = re.compile(r"[-–—:]")
LINE_SPLIT_RE = re.compile(r"[\n,;]")

WORKING_MARKER = "working"
CODES_MARKER = "codes"


def parse_html(markup: str) -> BeautifulSoup:
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(JUNK_TAGS):
        tag.decompose()
    return soup


def clean_text(text: str) -> str:
    """Turn non-breaking spaces into spaces. Entities are already decoded."""
    return text.replace("\xa0", " ").strip()


def clean_candidate(text: str) -> str:
    """
    Reduce a line of text to the token in front of it.

    "SPRING25 - Get 500 gems (expires 2025-12-01)" -> "SPRING25"
    """
    text = PAREN_RE.sub("", clean_text(text))
    text = TRUNCATE_RE.split(text, maxsplit=1)[0]
    return text.strip()


def split_candidates(text: str) -> list:
    candidates = []
    for line in LINE_SPLIT_RE.split(text):
        candidate = clean_candidate(line)
        if candidate:
            candidates.append(candidate)
    return candidates


def is_candidate_element(tag) -> bool:
    if tag.name in CANDIDATE_TAGS:
        return True
    return tag.name in LEAF_BLOCK_TAGS and tag.find(BLOCK_TAGS) is None


def _normalized_text(element) -> str:
    return " ".join(element.get_text(" ").split()).lower()


def _accept(candidates, source) -> set:
    codes = set()
    for candidate in candidates:
        if source.lowercase:
            candidate = candidate.lower()
        if is_valid_code(candidate, allow_dots=source.allow_dots,
                         reject_all_digits=source.reject_all_digits):
            codes.add(candidate)
    return codes


def scan_document(document, source) -> set:
    codes = set()
    for element in document.find_all(is_candidate_element):
        codes |= _accept(split_candidates(element.get_text()), source)

    if not codes:
        body = document.body or document
        codes = _accept(split_candidates(body.get_text("\n")), source)
        log.debug("No tagged codes, body text fallback gave %d", len(codes))
    return codes


def find_section_heading(document, marker: str):
    """
    Heading whose text contains `marker`, else the first one mentioning
    both "working" and "codes". None if neither exists.
    """
    headings = document.find_all(HEADING_TAGS)
    marker = (marker or "").strip().lower()

    if marker:
        for heading in headings:
            if marker in _normalized_text(heading):
                return heading

    for heading in headings:
        text = _normalized_text(heading)
        if WORKING_MARKER in text and CODES_MARKER in text:
            return heading
    return None


def scan_section(document, source) -> set:
    heading = find_section_heading(document, source.marker)
    if heading is None:
        log.warning("No working-codes heading on %s", source.url)
        return set()

    stop_marker = source.stop_marker.lower()
    codes = set()
    for sibling in heading.find_next_siblings():
        if stop_marker in _normalized_text(sibling):
            break
        elements = sibling.find_all(is_candidate_element)
        if is_candidate_element(sibling):
            elements.insert(0, sibling)
        elif not elements:
            elements = [sibling]
        for element in elements:
            codes |= _accept(split_candidates(element.get_text()), source)
    return codes


def extract_codes(document, source) -> set:
    if source.mode == MODE_SECTION:
        return scan_section(document, source)
    return scan_document(document, source)
