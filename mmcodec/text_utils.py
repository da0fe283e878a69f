from __future__ import annotations

_ESCAPES = {"\\": "\\\\", "\r": "\\r", "\n": "\\n", "\t": "\\t", "\0": "\\0"}


def _needs_escape(ch: str) -> bool:
    return (ch == "\\" or ch < "!" or ch > "~") and ch != " "


def escape_string(s: str) -> str:
    """Backslash-escape *s* so it reads as a string literal.

    Printable ASCII and spaces pass through; the usual control characters get
    their short escapes and anything else becomes ``\\uXXXX``.
    """
    first_bad = next((i for i, ch in enumerate(s) if _needs_escape(ch)), -1)
    if first_bad == -1:
        return s

    acc = [s[:first_bad]]
    for ch in s[first_bad:]:
        if not _needs_escape(ch):
            acc.append(ch)
        elif ch in _ESCAPES:
            acc.append(_ESCAPES[ch])
        else:
            acc.append(f"\\u{ord(ch):04x}")
    return "".join(acc)


def camel_case_to_sentence(s: str) -> str:
    """'roadBorder2' -> 'road border2', 'JumpWoosh' -> 'Jump woosh'."""
    acc = []
    for i, ch in enumerate(s):
        if ch.isupper() and i > 0:
            acc.append(" " + ch.lower())
        else:
            acc.append(ch)
    return "".join(acc)
