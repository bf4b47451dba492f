# src/translation_checker/dom/patterns.py
import abc
import re
from typing import Any, Union


class TextPattern(metaclass=abc.ABCMeta):
    """
    A single rule for recognising an untranslated string.

    Concrete variants are `LiteralPattern` (substring containment) and
    `RegexPattern` (regex search, not full-match).
    """

    @abc.abstractmethod
    def matches(self, candidate: str) -> bool:
        raise NotImplementedError("Every pattern must implement 'matches'.")

    @abc.abstractmethod
    def to_setting(self) -> dict:
        """Returns the settings.json representation of this pattern."""
        raise NotImplementedError


class LiteralPattern(TextPattern):
    def __init__(self, literal: str):
        self.literal = literal

    def matches(self, candidate: str) -> bool:
        return self.literal in candidate

    def to_setting(self) -> dict:
        return {"literal": self.literal}

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LiteralPattern) and other.literal == self.literal

    def __hash__(self) -> int:
        return hash(("literal", self.literal))

    def __repr__(self) -> str:
        return f"LiteralPattern({self.literal!r})"


class RegexPattern(TextPattern):
    def __init__(self, pattern: Union[str, re.Pattern]):
        self.regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    def matches(self, candidate: str) -> bool:
        return self.regex.search(candidate) is not None

    def to_setting(self) -> dict:
        return {"regex": self.regex.pattern}

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, RegexPattern)
            and other.regex.pattern == self.regex.pattern
            and other.regex.flags == self.regex.flags
        )

    def __hash__(self) -> int:
        return hash(("regex", self.regex.pattern, self.regex.flags))

    def __repr__(self) -> str:
        return f"RegexPattern({self.regex.pattern!r})"


def to_pattern(value: Any) -> TextPattern:
    """
    Coerces user input into a pattern variant.

    - `TextPattern` instances are returned unchanged.
    - Compiled regexes become a `RegexPattern`.
    - Plain strings become a `LiteralPattern`.
    - Dicts from settings.json: {"regex": "..."} or {"literal": "..."}.
    """
    if isinstance(value, TextPattern):
        return value
    if isinstance(value, re.Pattern):
        return RegexPattern(value)
    if isinstance(value, str):
        return LiteralPattern(value)
    if isinstance(value, dict):
        if "regex" in value:
            flags = re.IGNORECASE if value.get("ignore_case") else 0
            return RegexPattern(re.compile(value["regex"], flags))
        if "literal" in value:
            return LiteralPattern(str(value["literal"]))
    raise ValueError(f"Unsupported pattern definition: {value!r}")
