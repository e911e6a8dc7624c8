"""Glob helpers for repository paths.

Syntax:
- ``*`` matches any characters except ``/``
- ``?`` matches one character except ``/``
- ``/**/`` matches ``/`` or any number of directories; a trailing ``/**``
  matches everything below
- ``{a,b}`` matches one of the alternatives (alternatives may nest)
- ``[...]`` is a character class
- ``\\`` escapes the next character
"""

import re
from functools import lru_cache

_WILDCARDS = "*?{["


def _first_wildcard(glob: str) -> int:
    """Return the index of the first unescaped wildcard or -1."""
    escaped = False
    for i, char in enumerate(glob):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _WILDCARDS:
            return i
    return -1


def is_dynamic(glob: str) -> bool:
    """Check whether the glob contains wildcards."""
    return _first_wildcard(glob) >= 0


def get_base_path(glob: str) -> str:
    """Return the longest directory prefix of the glob without wildcards.

    Examples:
        >>> get_base_path("/app/public/{css,js}")
        '/app/public'
        >>> get_base_path("/app/*.css")
        '/app'
        >>> get_base_path("/*.css")
        '/'
        >>> get_base_path("/app/public")
        '/app'
    """
    end = _first_wildcard(glob)
    if end < 0:
        end = len(glob)

    slash = glob.rfind("/", 0, end)
    if slash <= 0:
        return "/"

    return glob[:slash]


def _translate(glob: str, i: int, in_braces: bool) -> tuple[str, int]:
    parts: list[str] = []
    n = len(glob)

    while i < n:
        char = glob[i]

        if char == "\\" and i + 1 < n:
            parts.append(re.escape(glob[i + 1]))
            i += 2
        elif glob.startswith("/**/", i):
            parts.append("/(?:.*/)?")
            i += 4
        elif glob.startswith("/**", i) and i + 3 == n:
            parts.append("(?:/.*)?")
            i += 3
        elif glob.startswith("**", i):
            parts.append(".*")
            i += 2
        elif char == "*":
            parts.append("[^/]*")
            i += 1
        elif char == "?":
            parts.append("[^/]")
            i += 1
        elif char == "[":
            close = glob.find("]", i + 1)
            if close < 0:
                parts.append(re.escape(char))
                i += 1
            else:
                body = glob[i + 1 : close]
                if body.startswith("!"):
                    body = "^" + body[1:]
                parts.append(f"[{body}]")
                i = close + 1
        elif char == "{":
            alternatives = []
            i += 1
            while True:
                regex, i = _translate(glob, i, in_braces=True)
                alternatives.append(regex)
                if i >= n:
                    break
                terminator = glob[i]
                i += 1
                if terminator == "}":
                    break
            parts.append("(?:" + "|".join(alternatives) + ")")
        elif in_braces and char in ",}":
            return "".join(parts), i
        else:
            parts.append(re.escape(char))
            i += 1

    return "".join(parts), i


@lru_cache(maxsize=256)
def to_regex(glob: str) -> re.Pattern:
    """Compile the glob into an anchored regular expression."""
    regex, _ = _translate(glob, 0, in_braces=False)
    return re.compile(f"^{regex}$")


def matches(path: str, glob: str) -> bool:
    """Check whether a repository path matches the glob."""
    return to_regex(glob).match(path) is not None
