"""Brace-parameterized path patterns.

A pattern such as `/subscriptions/{subscriptionId}/resourceGroups` is split
on slashes. A segment written as `{name}` captures exactly one non-empty
segment of a concrete path, every other segment must match literally.
Matching is always whole-path: pattern and path need the same number of
segments.
"""

import re
from dataclasses import dataclass
from typing import Optional

PLACEHOLDER = re.compile(r"^\{([^{}/]+)\}$")


class PatternError(ValueError):
    """Path pattern can not be compiled."""


def split_path(path: str) -> list[str]:
    """Split path into segments, ignoring the leading slash."""
    return path.split("/")[1:] if path.startswith("/") else path.split("/")


def literal_prefix(pattern: str) -> str:
    """Return literal part of pattern that precedes the first placeholder.

    Examples:
        >>> literal_prefix("/users/{user-id}/memberOf")
        '/users/'
        >>> literal_prefix("/users")
        '/users'
    """
    position = pattern.find("{")
    if position == -1:
        return pattern
    return pattern[:position] or "/"


@dataclass(frozen=True)
class CompiledPattern:
    """Matcher derived from one path pattern.

    `segments` holds either the literal text of a segment or None for a
    capture; `param_names` holds the capture name at the same position.
    """

    pattern: str
    segments: tuple[Optional[str], ...]
    param_names: tuple[Optional[str], ...]

    @property
    def is_exact(self) -> bool:
        """Return True when the pattern has no placeholders."""
        return all(name is None for name in self.param_names)

    def match(self, path: str) -> tuple[bool, dict[str, str]]:
        """Match concrete path against the pattern.

        Parameters:
            path (str): Request path without query string.

        Returns:
            tuple[bool, dict[str, str]]: Whether the path matched and the
            captured parameters. A failed match never returns partial
            parameters.
        """
        if self.is_exact:
            return (path == self.pattern, {})

        parts = split_path(path)
        if len(parts) != len(self.segments):
            return (False, {})

        params: dict[str, str] = {}
        for literal, name, part in zip(self.segments, self.param_names, parts):
            if name is not None:
                if part == "":
                    return (False, {})
                params[name] = part
            elif literal != part:
                return (False, {})
        return (True, params)


def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile one path pattern into a matcher.

    Parameters:
        pattern (str): Slash-delimited pattern, starting with a slash.

    Returns:
        CompiledPattern: The compiled matcher.

    Raises:
        PatternError: If the pattern does not start with a slash, a segment
        mixes literal text with a placeholder, or a placeholder name is used
        twice.
    """
    if not pattern.startswith("/"):
        raise PatternError(f"pattern must start with '/': {pattern!r}")

    segments: list[Optional[str]] = []
    names: list[Optional[str]] = []
    for segment in split_path(pattern):
        captured = PLACEHOLDER.match(segment)
        if captured is not None:
            name = captured.group(1)
            if name in names:
                raise PatternError(
                    f"duplicate placeholder {{{name}}} in pattern {pattern!r}"
                )
            segments.append(None)
            names.append(name)
        elif "{" in segment or "}" in segment:
            raise PatternError(f"malformed segment {segment!r} in pattern {pattern!r}")
        else:
            segments.append(segment)
            names.append(None)

    return CompiledPattern(
        pattern=pattern, segments=tuple(segments), param_names=tuple(names)
    )
