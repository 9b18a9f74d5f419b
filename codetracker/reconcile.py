# -*- coding: utf-8 -*-
"""
Merge one run's findings into the persisted code store.

A stored record looks like

    {"code": "SPRING25", "sources": ["https://..."],
     "first_seen": "2025-01-01T00:00:00+00:00",
     "last_seen": "2025-01-02T00:00:00+00:00"}

`first_seen` never changes once written; `last_seen` and `sources` are
refreshed every run the code is still observed or kept by the manual list.
"""

from dataclasses import dataclass
from typing import Dict, List, Set

from dateutil.parser import isoparse

MANUAL_SOURCE = "manual"


@dataclass
class ReconcileResult:
    store: Dict[str, dict]
    added: List[str]
    removed: List[str]


def canonical(code: str) -> str:
    """Key codes are compared by; pages disagree on case."""
    return code.upper()


def add_page(aggregate: Dict[str, Set[str]], codes, origin: str) -> Dict[str, Set[str]]:
    """
    Fold the codes found on one page into the run aggregate. A code already
    in the aggregate under another case keeps its first spelling.
    """
    spelling = {canonical(code): code for code in aggregate}
    for code in codes:
        code = spelling.setdefault(canonical(code), code)
        aggregate.setdefault(code, set()).add(origin)
    return aggregate


def _timestamp(value, now: str) -> str:
    if not isinstance(value, str):
        return now
    try:
        isoparse(value)
    except ValueError:
        return now
    return value


def _load_record(code: str, entry, now: str) -> dict:
    if not isinstance(entry, dict):
        entry = {}
    sources = entry.get("sources")
    if not isinstance(sources, (list, tuple, set)):
        sources = []
    return {
        "code": code,
        "sources": {s for s in sources if isinstance(s, str)},
        "first_seen": _timestamp(entry.get("first_seen"), now),
        "last_seen": _timestamp(entry.get("last_seen"), now),
    }


def _touch(store: dict, code: str, origins, now: str):
    record = store.get(canonical(code))
    if record is None:
        store[canonical(code)] = {
            "code": code,
            "sources": set(origins),
            "first_seen": now,
            "last_seen": now,
        }
    else:
        record["sources"].update(origins)
        record["last_seen"] = now


def _dump(store: dict) -> Dict[str, dict]:
    records = sorted(store.values(), key=lambda record: record["code"])
    return {
        record["code"]: dict(record, sources=sorted(record["sources"]))
        for record in records
    }


def reconcile(prior: dict, fresh: Dict[str, Set[str]], manual, blocked,
              now: str, expire: bool = False) -> ReconcileResult:
    """
    Merge `fresh` (code -> origins seen this run) into `prior`.

    Codes match case-insensitively everywhere; a stored record keeps the
    spelling it was first seen with. Manual codes are always kept and
    tagged with the "manual" source. Blocked codes are dropped unless they
    are also manual. With `expire`, previously stored codes that were not
    seen this run are dropped too.
    """
    prior = prior if isinstance(prior, dict) else {}
    store = {}
    for code, entry in prior.items():
        record = _load_record(code, entry, now)
        existing = store.get(canonical(code))
        if existing is None:
            store[canonical(code)] = record
        else:
            # older stores may hold one code under two spellings
            existing["sources"] |= record["sources"]
    prior_keys = set(store)

    for code, origins in fresh.items():
        _touch(store, code, origins, now)

    manual_keys = {canonical(code) for code in manual}
    for code in manual:
        _touch(store, code, [MANUAL_SOURCE], now)

    blocked_keys = {canonical(code) for code in blocked} - manual_keys
    for key in list(store):
        if key in blocked_keys:
            del store[key]

    if expire:
        seen = {canonical(code) for code in fresh} | manual_keys
        for key in list(store):
            if key not in seen:
                del store[key]

    added = sorted(store[key]["code"] for key in store if key not in prior_keys)
    removed = sorted(code for code in prior if canonical(code) not in store)
    return ReconcileResult(_dump(store), added, removed)
