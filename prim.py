# prim.py
# Public entry points of the prim JSON codec: parse, stringify and the CLI.
#
# =============================================================================
#  OVERVIEW
# =============================================================================
#
#     parse(text, reviver)          lexer -> json_parser -> (reviver pass)
#     stringify(value, filter, width)   serializer
#
# The two pipelines share the value model in values.py and nothing else.
# Both are synchronous and keep all state local to the call.
#
# Errors:
#     SyntaxError            any lexical or grammatical violation in parse
#     CyclicStructureError   stringify met an ownership cycle (a TypeError)
#     RangeError             a time value outside +/-8.64e15 ms (a ValueError)
#     DepthLimitError        nesting beyond max_depth (a RecursionError)
#
# =============================================================================

import argparse
import logging
import sys
from typing import Any, Callable, List, Optional

from json_parser import DEPTH_LIMIT_DEFAULT, parse_text, revive
from lexer import Token, lex
from serializer import serialize
from values import (
    UNDEFINED,
    Boxed,
    Convertible,
    CyclicStructureError,
    DepthLimitError,
    RangeError,
    Timestamp,
)

logger = logging.getLogger(__name__)

__all__ = [
    "parse",
    "stringify",
    "lex",
    "Token",
    "UNDEFINED",
    "Boxed",
    "Convertible",
    "Timestamp",
    "CyclicStructureError",
    "DepthLimitError",
    "RangeError",
]

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse(text, reviver: Optional[Callable[[str, Any], Any]] = None, *,
          max_depth: int = DEPTH_LIMIT_DEFAULT):
    """
    Parse JSON text, then run `reviver(key, value)` over the result if one is
    given.

    bytes input is decoded as UTF-8. A non-callable reviver is ignored. The
    result is UNDEFINED only when the reviver returns UNDEFINED for the root.
    """
    if isinstance(text, (bytes, bytearray)):
        text = text.decode("utf-8")
    result = parse_text(text, max_depth=max_depth)
    if callable(reviver):
        result = revive(result, reviver)
    return result


def stringify(value, filter=None, width=None, *, max_depth: int = DEPTH_LIMIT_DEFAULT):
    """
    Serialize `value` to JSON text.

    `filter` is a replacer function `(key, value)` or a list of member names
    to keep; `width` is a number of spaces (capped at 10) or an indent
    string (cut to 10 characters). Returns UNDEFINED when the value has no
    JSON representation at the root (a function or UNDEFINED itself).
    """
    return serialize(value, filter, width, max_depth=max_depth)

# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def _width(text: str):
    """--indent accepts a count or a literal indent string."""
    try:
        return int(text)
    except ValueError:
        return text.replace("\\t", "\t")


def _cli(argv: List[str]):
    """
    Command-line validator and reformatter.

    Exit code 0 on success, 1 on SyntaxError, so the tool can gate builds.
    """
    ap = argparse.ArgumentParser(description="Strict JSON validator and reformatter")
    ap.add_argument("file", help="JSON file to verify")
    ap.add_argument("--debug", action="store_true", help="dump token stream and exit")
    ap.add_argument("--max-depth", type=int, default=DEPTH_LIMIT_DEFAULT)
    ap.add_argument("--indent", type=_width, default=None,
                    help="print the document re-serialized with this indent")
    ap.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with open(args.file, "r", encoding="utf-8") as fh:
        data = fh.read()
    logger.debug("read %d characters from %s", len(data), args.file)

    try:
        if args.debug:
            for tok in lex(data):
                print(tok)
            return 0
        value = parse(data, max_depth=args.max_depth)
    except SyntaxError as exc:
        print(f"SyntaxError: {exc}", file=sys.stderr)
        return 1
    except DepthLimitError as exc:
        print(f"DepthLimitError: {exc}", file=sys.stderr)
        return 1

    if args.indent is None:
        print("OK")
    else:
        print(stringify(value, None, args.indent, max_depth=args.max_depth))
    return 0


def main():
    return _cli(sys.argv[1:])

# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main())
