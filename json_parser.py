# json_parser.py
# Recursive-descent JSON parser and reviver pass for the prim codec.
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT FOR STRUCTURE
# =============================================================================
#
# This parser uses a classic recursive-descent strategy for JSON, which is
# expression-free and thus well-suited for direct, predictable control flow
# without an expression parser layer [geeksforgeeks.org, Recursive Descent Parser;
# cs.rochester.edu, Recursive-Descent Parsing].
#
# Design Rationale:
# 1. JSON grammar is LL(1): no left recursion and no precedence, so each
#    grammar rule maps onto one function [online.stanford.edu, Compilers I].
# 2. LookAhead (lexer.py) gives the one token of pushback needed to spot the
#    closing bracket of an empty container.
# 3. Any JSON value may stand at the root [RFC 8259, 2], but exactly one:
#    trailing tokens are rejected.
#
# The depth guard is a resource limit, not a grammar rule, so it raises
# DepthLimitError rather than SyntaxError.
#
# The reviver pass runs after the tree is complete and walks it bottom-up
# [ECMA-262 5.1, 15.12.2 Walk].
#
# =============================================================================
#  REFERENCES
# =============================================================================
# [1] geeksforgeeks.org - Recursive Descent Parser
# [2] cs.rochester.edu - Recursive-Descent Parsing
# [3] RFC 8259 - The JavaScript Object Notation (JSON) standard
# [4] ECMA-262 5.1 - 15.12.2 JSON.parse
# =============================================================================

import logging
from typing import Any, Callable

from lexer import LookAhead, lex
from values import UNDEFINED, DepthLimitError, JSONArray, JSONObject, JSONValue

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 256        # Two interpreter frames per level stays clear of the recursion limit

# ---------------------------------------------------------------------------
# PARSER UTILITY
# ---------------------------------------------------------------------------
def _next(tokens: LookAhead):
    try:
        return next(tokens)
    except StopIteration:
        raise SyntaxError("unexpected end of input") from None


def _peek(tokens: LookAhead):
    try:
        return tokens.peek()
    except StopIteration:
        raise SyntaxError("unexpected end of input") from None


def _expect(tokens: LookAhead, expected_kind: str, expected_value=None):
    """
    Consume and verify the next token. Raises a precise error with expected and actual.
    """
    kind, value, pos = _next(tokens)
    if kind != expected_kind or (expected_value is not None and value != expected_value):
        exp = expected_kind if expected_value is None else f"{expected_kind} '{expected_value}'"
        raise SyntaxError(f"unexpected token {kind} {value!r} at offset {pos} - expected {exp}")
    return value

# ---------------------------------------------------------------------------
# CORE VALUE PARSER
# ---------------------------------------------------------------------------
def _parse_value(tokens: LookAhead, depth: int, max_depth: int) -> JSONValue:
    """
    Dispatch on the token kind.
    """
    kind, value, pos = _next(tokens)

    if kind in ("STRING", "NUMBER", "LITERAL"):
        return value
    if kind == "BRACE" and value == "{":
        return _parse_object(tokens, depth + 1, max_depth)
    if kind == "BRACKET" and value == "[":
        return _parse_array(tokens, depth + 1, max_depth)

    raise SyntaxError(f"unexpected token {kind} {value!r} at offset {pos} - value expected")

# ---------------------------------------------------------------------------
# ARRAY PARSER
# ---------------------------------------------------------------------------
def _parse_array(tokens: LookAhead, depth: int, max_depth: int) -> JSONArray:
    """
    Parse a JSON array body; the opening bracket is already consumed.

    A comma must always be followed by a value, so '[1,]' fails in
    _parse_value when it meets the closing bracket.
    """
    if depth > max_depth:
        raise DepthLimitError(f"nesting depth exceeds {max_depth}")
    items: JSONArray = []
    pk = _peek(tokens)
    if pk.kind == "BRACKET" and pk.value == "]":
        next(tokens)
        return items

    while True:
        items.append(_parse_value(tokens, depth, max_depth))
        pk = _peek(tokens)
        if pk.kind == "BRACKET" and pk.value == "]":
            next(tokens)
            return items
        _expect(tokens, "COMMA", ",")

# ---------------------------------------------------------------------------
# OBJECT PARSER
# ---------------------------------------------------------------------------
def _parse_object(tokens: LookAhead, depth: int, max_depth: int) -> JSONObject:
    """
    Parse a JSON object body; the opening brace is already consumed.

    Property names must be STRING tokens. A repeated name keeps its first
    position and takes the later value, which is plain dict assignment.
    """
    if depth > max_depth:
        raise DepthLimitError(f"nesting depth exceeds {max_depth}")
    obj: JSONObject = {}
    pk = _peek(tokens)
    if pk.kind == "BRACE" and pk.value == "}":
        next(tokens)
        return obj

    while True:
        key = _expect(tokens, "STRING")
        _expect(tokens, "COLON", ":")
        obj[key] = _parse_value(tokens, depth, max_depth)
        pk = _peek(tokens)
        if pk.kind == "BRACE" and pk.value == "}":
            next(tokens)
            return obj
        _expect(tokens, "COMMA", ",")

# ---------------------------------------------------------------------------
# REVIVER PASS
# ---------------------------------------------------------------------------
def _walk(holder, key, reviver: Callable[[str, Any], Any]):
    value = holder[key]
    if isinstance(value, list):
        for index in range(len(value)):
            revived = _walk(value, index, reviver)
            value[index] = None if revived is UNDEFINED else revived
    elif isinstance(value, dict):
        for name in list(value):
            # An earlier reviver call may have deleted a sibling.
            if name not in value:
                continue
            revived = _walk(value, name, reviver)
            if revived is UNDEFINED:
                del value[name]
            else:
                value[name] = revived
    return reviver(str(key), value)


def revive(value, reviver: Callable[[str, Any], Any]):
    """
    Run `reviver(key, value)` over a parsed tree, deepest nodes first.

    The root is visited last under the key "" of a synthetic holder, and its
    result is returned as is (UNDEFINED included). Containers are updated in
    place: UNDEFINED deletes an object member and nulls an array slot.
    """
    return _walk({"": value}, "", reviver)

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse_text(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> JSONValue:
    """
    Parse JSON text into Python structures.

    Exactly one value must make up the document: empty input fails as an
    unexpected end of input, and anything after the root value fails as
    extra data [RFC 8259, 2].
    """
    logger.debug("parsing %d characters (max_depth=%d)", len(text), max_depth)
    tokens = LookAhead(lex(text))
    result = _parse_value(tokens, 0, max_depth)
    try:
        extra = next(tokens)
    except StopIteration:
        return result
    raise SyntaxError(f"extra data after root value at offset {extra.offset}")
