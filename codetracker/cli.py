#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command line entry point.

    code-tracker                 # run the tracker
    code-tracker add CODE        # keep CODE even when no source lists it
    code-tracker remove CODE
    code-tracker block CODE      # never store CODE (unless manual)
    code-tracker unblock CODE
    code-tracker list manual|blocked|codes
"""

import argparse
import logging
import sys

from .config import TrackerError, load_config
from .pipeline import run
from .store import add_to_list, load_codes, load_list, remove_from_list

log = logging.getLogger("codetracker")

LOG_FORMAT = "[%(levelname)s] %(message)s"


def setup_logging(verbose: bool = False):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format=LOG_FORMAT)
    # requests/urllib3 chatter is not useful at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="code-tracker",
        description="Collect Legend of Mushroom gift codes and announce new ones.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    parser.add_argument("--env-file", default=None, help="dotenv file (default: .env)")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("run", help="fetch sources and update the code store (default)")
    for name, text in (
        ("add", "add a code to the manual list"),
        ("remove", "remove a code from the manual list"),
        ("block", "add a code to the block list"),
        ("unblock", "remove a code from the block list"),
    ):
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument("code")

    show = sub.add_parser("list", help="print the manual list, block list or stored codes")
    show.add_argument("which", choices=["manual", "blocked", "codes"])
    return parser


def _edit_list(args, config) -> int:
    if args.command in ("add", "remove"):
        path, label = config.manual_path, "manual list"
    else:
        path, label = config.blocked_path, "block list"

    code = args.code.strip()
    if not code:
        log.error("Empty code")
        return 2

    if args.command in ("add", "block"):
        if add_to_list(path, code):
            log.info("Added %s to the %s", code, label)
        else:
            log.info("%s is already on the %s", code, label)
    elif remove_from_list(path, code):
        log.info("Removed %s from the %s", code, label)
    else:
        log.info("%s is not on the %s", code, label)
    return 0


def _show(args, config) -> int:
    if args.which == "codes":
        items = sorted(load_codes(config.codes_path))
    elif args.which == "manual":
        items = load_list(config.manual_path)
    else:
        items = load_list(config.blocked_path)
    for item in items:
        print(item)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(dotenv_path=args.env_file)
        if args.command in ("add", "remove", "block", "unblock"):
            return _edit_list(args, config)
        if args.command == "list":
            return _show(args, config)

        log.info("Starting code collection")
        result = run(config)
        log.info("Done: %d found, %d new, %d removed",
                 result.found, len(result.added), len(result.removed))
        return 0
    except TrackerError as e:
        log.error("%s", e)
        return 1
    except Exception:
        log.exception("Run failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
