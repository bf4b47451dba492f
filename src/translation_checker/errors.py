# src/translation_checker/errors.py
from typing import List, Optional

from translation_checker.model import Defect


class TranslationCheckerError(Exception):
    """Base class for everything the checker raises on purpose."""


class TranslationIssuesFound(TranslationCheckerError, AssertionError):
    """
    Raised by a manual check with `fail_on_error` enabled. The message only
    carries the count; the details go to the log.
    """

    def __init__(self, errors: List[Defect]):
        self.errors = list(errors)
        super().__init__(
            f"Found {len(self.errors)} translation issue(s) on the page. "
            f"Check console for details."
        )


class TranslationValidationFailed(TranslationCheckerError, AssertionError):
    """Raised by the end-of-run validation when at least one page has issues."""

    def __init__(self, message: str, failed_urls: Optional[List[str]] = None):
        self.failed_urls = list(failed_urls or [])
        super().__init__(message)


class TrackerNotEnabled(TranslationCheckerError):
    """Automatic checking was requested but never enabled for this run."""
