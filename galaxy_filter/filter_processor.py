#!/usr/bin/env python3
"""Filter spansh galaxy dumps down to bodies, coordinates and stars."""

import argparse, logging, sys
from typing import List, Optional

from galaxy_filter.pipeline import run
from shared.diagnostics import Diagnostics, FatalError
from shared.settings import byte_ceiling_from_env, in_container

logger = logging.getLogger(__name__)

DESCRIPTION = "Filter JSON streamed from spansh galaxy files."


def usage_text(prog: str) -> str:
    """Return the Arguments/Usage/Examples block; differs inside a container."""
    if in_container():
        arguments = ["'GALAXY ABSOLUTE PATH' is the absolute path to the GALAXY file."]
        usage = 'docker run -i -v "<GALAXY ABSOLUTE PATH>:/galaxy.json.gz" galaxy.json.gz'
        examples = ['docker run -i -v "$(pwd)/galaxy.json.gz:/galaxy.json.gz" galaxy.json.gz']
    else:
        arguments = ["'GALAXY PATH' is the path to the GALAXY file."]
        usage = prog
        examples = [f"{prog} galaxy.json.gz"]

    lines = ["Arguments:"]
    lines += [f"  {a}" for a in arguments]
    lines += ["", "Usage:", f"  {usage}", "", "Examples:"]
    lines += [f"  {e}" for e in examples]
    return "\n".join(lines)


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog=prog,
        description=DESCRIPTION,
        epilog=usage_text(prog or "galaxy-filter"),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("file", help="gzip-compressed galaxy JSON file, or - for stdin")
    ap.add_argument("--limit-bytes", type=int,
                    help="override the decompressed byte ceiling")
    ap.add_argument("-v", "--verbose", action="count", default=0,
                    help="log progress (-v) or field-level detail (-vv) to stderr")
    return ap


def _open_input(path: str):
    if path == "-":
        return sys.stdin.buffer
    return open(path, "rb")


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s: %(message)s")
    diagnostics = Diagnostics(logger)

    try:
        limit = args.limit_bytes if args.limit_bytes is not None else byte_ceiling_from_env()
        if limit <= 0:
            raise ValueError(f"--limit-bytes must be positive, got {limit}")
    except ValueError as e:
        logger.critical("ERROR: %s", e)
        return 1

    try:
        f = _open_input(args.file)
    except OSError as e:
        logger.critical("ERROR: could not open file %r: %s", args.file, e)
        return 1

    try:
        run(f, sys.stdout.buffer, limit=limit, diagnostics=diagnostics)
    except FatalError:
        return 1
    finally:
        if f is not sys.stdin.buffer:
            f.close()
    return 0


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
