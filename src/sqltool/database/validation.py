"""Pre-execution trust screen for query text and parameter values.

This is a cheap denylist filter that rejects obviously destructive or
comment-smuggling queries. It does not parse SQL and can be bypassed by
equivalent constructs; parameter binding is what keeps values out of the
statement text.
"""

import re
from typing import Any, Optional, Sequence

# Destructive statements rejected anywhere in the query text
UNSAFE_COMMANDS = ["DROP TABLE", "DROP DATABASE", "TRUNCATE TABLE"]

# Comment and statement-terminator fragments
UNSAFE_PATTERNS = ["; DROP", "--", "/*", "*/"]

_WHITESPACE = re.compile(r"\s+")


def _normalize(text: str) -> str:
    # Upper-case and collapse whitespace runs so "drop\n  table" still matches
    return _WHITESPACE.sub(" ", text).upper()


def find_unsafe_fragment(
    query: str,
    values: Sequence[Any] = (),
    screen_parameters: bool = True,
) -> Optional[str]:
    """Return the first denylist entry found in the query or its values.

    Args:
        query: SQL text
        values: Positional parameter values
        screen_parameters: Also screen string-typed values for comment and
            terminator fragments

    Returns:
        The matched denylist entry, or None if nothing matched
    """
    normalized = _normalize(query)

    for command in UNSAFE_COMMANDS:
        if command in normalized:
            return command

    for pattern in UNSAFE_PATTERNS:
        if pattern in normalized:
            return pattern

    if screen_parameters:
        for value in values:
            if not isinstance(value, str):
                continue
            normalized_value = _normalize(value)
            for pattern in UNSAFE_PATTERNS:
                if pattern in normalized_value:
                    return pattern

    return None


def check_query(
    query: str,
    values: Sequence[Any] = (),
    screen_parameters: bool = True,
) -> tuple[bool, Optional[str]]:
    """Screen a query before execution.

    Returns:
        Tuple of (is_trusted, matched_pattern)
        - (True, None) if nothing on the denylist was found
        - (False, pattern) otherwise
    """
    pattern = find_unsafe_fragment(query, values, screen_parameters)
    return pattern is None, pattern


def is_trusted_query(
    query: str,
    values: Sequence[Any] = (),
    screen_parameters: bool = True,
) -> bool:
    """Quick check whether a query passes the trust screen."""
    is_trusted, _ = check_query(query, values, screen_parameters)
    return is_trusted
