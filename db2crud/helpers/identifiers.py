"""Turn database column names into safe C# identifiers."""

from __future__ import annotations

import re

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_]")

CSHARP_KEYWORDS: frozenset[str] = frozenset({
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch",
    "char", "checked", "class", "const", "continue", "decimal", "default",
    "delegate", "do", "double", "else", "enum", "event", "explicit",
    "extern", "false", "finally", "fixed", "float", "for", "foreach",
    "goto", "if", "implicit", "in", "int", "interface", "internal", "is",
    "lock", "long", "namespace", "new", "null", "object", "operator",
    "out", "override", "params", "private", "protected", "public",
    "readonly", "record", "ref", "return", "sbyte", "sealed", "short",
    "sizeof", "stackalloc", "static", "string", "struct", "switch", "this",
    "throw", "true", "try", "typeof", "uint", "ulong", "unchecked",
    "unsafe", "ushort", "using", "virtual", "void", "volatile", "while",
})


def to_identifier(raw_name: str) -> str:
    """Return a valid, non-keyword C# identifier for ``raw_name``.

    Example:
        >>> to_identifier("Order Date")
        'Order_Date'
        >>> to_identifier("1stLine")
        '_1stLine'
        >>> to_identifier("class")
        'class_'
    """
    ident = _INVALID_CHARS.sub("_", raw_name or "")
    if not ident or ident[0].isdigit():
        ident = "_" + ident
    if ident in CSHARP_KEYWORDS:
        ident += "_"
    return ident
