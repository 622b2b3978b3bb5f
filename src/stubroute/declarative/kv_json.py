"""Key-value shorthand to JSON.

``"name=John,age=42,admin=false"`` becomes
``{"name":"John","age":42,"admin":false}``.

This is a shorthand, not a JSON encoder: embedded quotes and commas are
not escaped, and a bracketed value containing a comma is split apart.
Write the JSON yourself (``string_content``) for anything richer.
"""

import re

_NUMBER = re.compile(r"-?\d+(\.\d+)?", re.ASCII)
_LITERALS = frozenset({"true", "false", "null"})


def is_bracketed(content: str) -> bool:
    """True for ``{...}`` or ``[...]``."""
    return (content.startswith("{") and content.endswith("}")) or (
        content.startswith("[") and content.endswith("]")
    )


def _format_value(value: str) -> str:
    if value in _LITERALS or _NUMBER.fullmatch(value) or is_bracketed(value):
        return value
    return f'"{value}"'


def key_values_to_json(content: str) -> str:
    """Convert ``key=value`` pairs separated by commas into a JSON object.

    Empty input becomes ``{}``. Input that is already bracketed (``{}``,
    ``[]``, ``{...}``, ``[...]``) is returned unchanged. Keys are always
    quoted; values stay bare when they are ``true``, ``false``, ``null``,
    a number, or bracketed. Pairs without ``=`` are skipped.
    """
    if not content:
        return "{}"
    if is_bracketed(content):
        return content

    members: list[str] = []
    for pair in content.split(","):
        if "=" not in pair:
            continue
        key, value = pair.split("=", 1)
        members.append(f'"{key.strip()}":{_format_value(value.strip())}')
    return "{" + ",".join(members) + "}"
