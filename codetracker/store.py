# -*- coding: utf-8 -*-
"""
JSON files backing the tracker: the code store plus the manual and
block lists. A missing or unreadable file counts as empty.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

log = logging.getLogger(__name__)


def _read_json(path: Path, expected: type):
    if not path.exists():
        return expected()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except ValueError as e:
        log.warning("Cannot parse %s, starting empty (%s)", path, e)
        return expected()
    if not isinstance(data, expected):
        log.warning("%s does not hold a JSON %s, starting empty", path, expected.__name__)
        return expected()
    return data


def _write_json(path: Path, data):
    """Write to a temp file next to `path`, then swap it in."""
    path = Path(path)
    directory = path.parent
    directory.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.write("\n")
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise


def load_codes(path) -> dict:
    return _read_json(Path(path), dict)


def save_codes(path, codes: dict):
    _write_json(path, {code: codes[code] for code in sorted(codes)})


def load_list(path) -> list:
    items = _read_json(Path(path), list)
    return sorted({item.strip() for item in items if isinstance(item, str) and item.strip()})


def save_list(path, items):
    _write_json(path, sorted(set(items)))


def add_to_list(path, code: str) -> bool:
    code = code.strip()
    if not code:
        raise ValueError("code must not be empty")
    items = load_list(path)
    if code in items:
        return False
    save_list(path, items + [code])
    return True


def remove_from_list(path, code: str) -> bool:
    code = code.strip()
    items = load_list(path)
    if code not in items:
        return False
    items.remove(code)
    save_list(path, items)
    return True
