# src/translation_checker/dom/matcher.py
from typing import Optional

from translation_checker.model import MatchConfig


class Matcher:
    """
    Decides whether a string looks like an unresolved translation key.

    The allow-list is consulted before the patterns: a string containing an
    allowed key is never a defect, whatever pattern it matches.
    """

    def __init__(self, config: MatchConfig):
        self.config = config

    def is_defect(self, value: Optional[str]) -> bool:
        if not value or not value.strip():
            return False

        if any(key in value for key in self.config.allowed_keys):
            return False

        return any(pattern.matches(value) for pattern in self.config.patterns)


def has_translation_issue(value: Optional[str], config: MatchConfig) -> bool:
    """Functional shortcut for one-off checks."""
    return Matcher(config).is_defect(value)
