"""Shell-aware tokenizer for captured build logs.

Splits a raw log into logical command lines (honoring backslash-newline
continuations), then each line into argument tokens (honoring double quotes
and backslash escapes). This is a small state machine, not a full shell
parser: there is no variable expansion, no single-quote handling and no
error on unbalanced quotes.
"""

from __future__ import annotations

from collections.abc import Iterator


def split_unescaped_newlines(text: str) -> list[str]:
    """
    Split ``text`` at every newline that is not escaped by a backslash.

    A backslash directly before a newline joins the two physical lines and
    both characters are dropped. ``\\\\`` collapses to a single backslash, so
    a double backslash before a newline does not escape it. Any other
    backslash is copied through. The fragment after the last newline is
    always returned, even when empty.

    Example::

        split_unescaped_newlines("a\\nb\\n")   -> ["a", "b", ""]
        split_unescaped_newlines("a \\\\\\nb")  -> ["a b"]
    """
    result: list[str] = []
    current: list[str] = []
    is_escaped = False

    for c in text:
        if c == "\n":
            if is_escaped:
                # line continuation
                is_escaped = False
                continue
            result.append("".join(current))
            current.clear()
        elif c == "\\":
            if is_escaped:
                current.append(c)
                is_escaped = False
            else:
                is_escaped = True
        else:
            if is_escaped:
                current.append("\\")
                is_escaped = False
            current.append(c)

    result.append("".join(current))
    return result


def split_string_into_parts(command: str) -> list[str]:
    """
    Split one logical command into argument tokens.

    Spaces split tokens unless quoted or escaped. A double quote toggles
    quoting, and closing a quote ends the current token. A backslash escapes
    the next character: an escaped quote yields just ``"``, any other escaped
    character keeps its backslash (``\\x`` stays ``\\x``). Tokens that still
    begin and end with a quote lose one layer of quotes. Empty tokens are
    dropped.

    Example::

        split_string_into_parts('"a b" c')       -> ["a b", "c"]
        split_string_into_parts('"a\\\\" b" c')   -> ['a" b', "c"]
    """
    result: list[str] = []
    arg: list[str] = []
    in_quote = False
    is_escaped = False

    for c in command:
        if c == '"' and not is_escaped:
            in_quote = not in_quote
            if not in_quote and arg:
                result.append("".join(arg))
                arg.clear()
        elif c == "\\" and not is_escaped:
            is_escaped = True
        elif c == " " and not in_quote and not is_escaped:
            if arg:
                result.append("".join(arg))
                arg.clear()
        else:
            if is_escaped and c != '"':
                arg.append("\\")
            arg.append(c)
            is_escaped = False

    if arg:
        result.append("".join(arg))

    return [_strip_outer_quotes(part) for part in result]


def _strip_outer_quotes(part: str) -> str:
    if len(part) >= 2 and part[0] == '"' and part[-1] == '"':
        return part[1:-1]
    return part


def tokenize(text: str) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line_number, tokens)`` for every logical line, 1-based."""
    for line_number, command in enumerate(split_unescaped_newlines(text), start=1):
        yield line_number, split_string_into_parts(command)
