from __future__ import annotations

import re
from typing import Any, Sequence

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def _validate_identifier(name: str, identifier_type: str = "identifier") -> str:
    """
    Validate that an identifier (table/column name) is safe for SQL interpolation.

    MySQL identifiers can contain letters, digits, underscores, and dollar signs,
    but we restrict to alphanumeric + underscore.

    ⚠️ SECURITY CONTRACT ⚠️
    Identifiers are spliced into SQL text inside backticks. Only names coming
    from entity declarations or trusted application code should reach here.

    Raises:
        TypeError: If identifier is not a string
        ValueError: If identifier contains unsafe characters or is invalid

    Example:
        >>> _validate_identifier("user_id", "column")
        'user_id'
        >>> _validate_identifier("'; DROP TABLE--", "table")
        ValueError: Invalid table '; DROP TABLE--': ...
    """
    if not isinstance(name, str):
        raise TypeError(f"{identifier_type} must be a string, got {type(name).__name__}")

    if not name:
        raise ValueError(f"{identifier_type} cannot be empty")

    if not _IDENTIFIER_RE.match(name):
        raise ValueError(
            f"Invalid {identifier_type} {name!r}: "
            "must start with letter/underscore and contain only alphanumeric characters and underscores"
        )

    if len(name) > 64:
        raise ValueError(f"{identifier_type} {name!r} exceeds MySQL's 64-character limit")

    return name


def quote_idents(names: Sequence[str]) -> list[str]:
    """`name` for each column."""
    return [f"`{name}`" for name in names]


def quote_named_values(names: Sequence[str]) -> list[str]:
    """:name placeholder for each column."""
    return [f":{name}" for name in names]


def quote_update_set(names: Sequence[str]) -> list[str]:
    """`name` = :name assignments for an UPDATE SET clause."""
    return [f"`{name}` = :{name}" for name in names]


def quote_select_set(names: Sequence[str]) -> list[str]:
    """`name` = ? equality filters for a WHERE clause."""
    return [f"`{name}` = ?" for name in names]


def rebind(sql: str, args: Sequence[Any]) -> tuple[str, dict[str, Any]]:
    """
    Turn positional ``?`` markers into named binds understood by ``text()``.

    Returns the rewritten SQL and the parameter mapping, e.g.
    ``("... WHERE `id` = :arg_0", {"arg_0": 42})``.

    Generated statements never contain string literals, so every ``?`` is a
    placeholder.
    """
    parts = sql.split("?")
    if len(parts) - 1 != len(args):
        raise ValueError(
            f"Statement has {len(parts) - 1} placeholders but {len(args)} arguments were given"
        )

    params: dict[str, Any] = {}
    out = [parts[0]]
    for i, (arg, tail) in enumerate(zip(args, parts[1:])):
        param_name = f"arg_{i}"
        params[param_name] = arg
        out.append(f":{param_name}")
        out.append(tail)
    return "".join(out), params
