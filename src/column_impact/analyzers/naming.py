"""Naming convention helpers for matching identifiers against a column name."""

import re

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def to_camel_case(snake_case: str) -> str:
    """Convert ``user_email`` to ``userEmail``.

    Underscores are dropped and the character after each one is upper-cased;
    every other character is lower-cased. A mixed-case name without
    underscores is already camel or Pascal case, so only its first character
    is lowered.
    """
    if not snake_case:
        return ""
    if "_" not in snake_case and not snake_case.isupper():
        return snake_case[0].lower() + snake_case[1:]

    result = []
    next_is_upper = False
    for char in snake_case:
        if char == "_":
            next_is_upper = True
        elif next_is_upper:
            result.append(char.upper())
            next_is_upper = False
        else:
            result.append(char.lower())
    return "".join(result)


def to_pascal_case(snake_case: str) -> str:
    """Convert ``user_email`` to ``UserEmail``."""
    camel_case = to_camel_case(snake_case)
    if not camel_case:
        return ""
    return camel_case[0].upper() + camel_case[1:]


def to_snake_case(camel_case: str) -> str:
    """Convert ``userEmail`` to ``user_email``."""
    if not camel_case:
        return ""
    return _CAMEL_BOUNDARY.sub(r"\1_\2", camel_case).lower()


def is_column_match(identifier: str, column_name: str) -> bool:
    """True if an identifier names the column under any naming convention."""
    if not identifier or not column_name:
        return False

    lowered = identifier.lower()
    if lowered == column_name.lower():
        return True
    if lowered == to_camel_case(column_name).lower():
        return True
    if lowered == to_pascal_case(column_name).lower():
        return True
    return to_snake_case(identifier) == column_name.lower()


def contains_column(text: str, column_name: str) -> bool:
    """True if the text mentions the column in snake, camel or Pascal case."""
    if not text or not column_name:
        return False

    lowered = text.lower()
    candidates = (
        column_name.lower(),
        to_camel_case(column_name).lower(),
        to_pascal_case(column_name).lower(),
    )
    return any(candidate and candidate in lowered for candidate in candidates)


def method_name_references(method_name: str, column_name: str) -> bool:
    """True for derived query names such as ``findByUserEmail``."""
    if not method_name or not column_name:
        return False
    camel_case = to_camel_case(column_name)
    pascal_case = to_pascal_case(column_name)
    return (bool(camel_case) and camel_case in method_name) or \
        (bool(pascal_case) and pascal_case in method_name)
