#
# src/catchrun/execution/arguments.py
#
"""
Escaping of argument lists into a single command line string, using the
quoting rules of the Microsoft C runtime (CommandLineToArgvW).
"""
import re
from collections.abc import Sequence

_NEEDS_QUOTING = re.compile(r'[\s"]')


def _quote(token: str) -> str:
    if token and not _NEEDS_QUOTING.search(token):
        return token

    parts = ['"']
    backslashes = 0
    for char in token:
        if char == "\\":
            backslashes += 1
        elif char == '"':
            # Backslashes in front of a quote are doubled and the quote itself escaped.
            parts.append("\\" * (backslashes * 2 + 1))
            parts.append('"')
            backslashes = 0
        else:
            parts.append("\\" * backslashes)
            parts.append(char)
            backslashes = 0
    # Trailing backslashes sit in front of the closing quote.
    parts.append("\\" * (backslashes * 2))
    parts.append('"')
    return "".join(parts)


def escape_arguments(tokens: Sequence[str]) -> str:
    """
    Builds one command line string that splits back into exactly 'tokens'.

    Empty tokens are kept as a quoted empty argument; tokens with whitespace
    or double quotes are quoted, with embedded quotes and the backslashes that
    precede them escaped.
    """
    return " ".join(_quote(token) for token in tokens)


def split_arguments(command_line: str) -> list[str]:
    """
    Splits a command line into tokens the way the Microsoft C runtime does.

    This is the inverse of escape_arguments, used by launchers that have to
    hand an argv list to the operating system.
    """
    args: list[str] = []
    current: list[str] = []
    in_quotes = False
    have_token = False
    i = 0
    length = len(command_line)

    while i < length:
        char = command_line[i]

        if char in " \t" and not in_quotes:
            if have_token:
                args.append("".join(current))
                current = []
                have_token = False
            i += 1
            continue

        have_token = True

        if char == "\\":
            end = i
            while end < length and command_line[end] == "\\":
                end += 1
            count = end - i
            if end < length and command_line[end] == '"':
                current.append("\\" * (count // 2))
                if count % 2:
                    current.append('"')
                    end += 1
            else:
                current.append("\\" * count)
            i = end
            continue

        if char == '"':
            if in_quotes and i + 1 < length and command_line[i + 1] == '"':
                # A doubled quote inside a quoted run is a literal quote.
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue

        current.append(char)
        i += 1

    if have_token:
        args.append("".join(current))
    return args

# 🔼⚙️
