# src/translation_checker/model.py
import json
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from translation_checker.dom.patterns import TextPattern, to_pattern

# --- Built-in defaults ---

DEFAULT_PATTERNS: List[Any] = [
    re.compile(r"\{\{.*?\}\}"),  # {{key}} or {{namespace.key}}
    re.compile(r"\[\[.*?\]\]"),  # [[key]]
    re.compile(r"i18n\."),  # i18n.key
    re.compile(r"^[A-Z_]+\.[A-Z_]+"),  # NAMESPACE.KEY
    re.compile(r"\$t\(.*?\)"),  # $t('key')
]

DEFAULT_EXCLUDE_SELECTORS: List[str] = [
    "script",
    "style",
    "noscript",
    "[data-translation-ignore]",
    ".translation-ignore",
]

DEFAULT_CHECK_ATTRIBUTES: List[str] = ["placeholder", "title", "alt", "aria-label"]

DEFAULT_WAIT_TIME = 500


class DefectKind(str, Enum):
    TEXT = "text"
    ATTRIBUTE = "attribute"


class Defect(BaseModel):
    """
    A single translation issue found during one scan.

    Field names follow the serialized shape of the results
    ('type', 'text', 'attribute', 'element', 'xpath').
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: DefectKind = Field(alias="type")
    text: str
    attribute: Optional[str] = None
    element: str
    xpath: str

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("defect text cannot be empty")
        return v

    @model_validator(mode="after")
    def _attribute_matches_kind(self) -> "Defect":
        if self.kind is DefectKind.ATTRIBUTE and not self.attribute:
            raise ValueError("attribute defects require an attribute name")
        if self.kind is DefectKind.TEXT and self.attribute:
            raise ValueError("text defects cannot carry an attribute name")
        return self


class MatchConfig(BaseModel):
    """
    Scanning policy: what counts as untranslated, and where to look.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    patterns: List[TextPattern] = Field(default_factory=lambda: [to_pattern(p) for p in DEFAULT_PATTERNS])
    exclude_selectors: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_SELECTORS))
    allowed_keys: List[str] = Field(default_factory=list)
    check_attributes: List[str] = Field(default_factory=lambda: list(DEFAULT_CHECK_ATTRIBUTES))
    fail_on_error: bool = True
    log_errors: bool = True

    @field_validator("patterns", mode="before")
    @classmethod
    def _coerce_patterns(cls, v: Any) -> List[TextPattern]:
        if v is None:
            return []
        if isinstance(v, (str, re.Pattern, dict, TextPattern)):
            v = [v]
        return [to_pattern(item) for item in v]

    @field_validator("exclude_selectors", "allowed_keys", "check_attributes", mode="before")
    @classmethod
    def _coerce_string_list(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [str(item) for item in v]

    @classmethod
    def from_settings(cls, settings: Optional[Dict[str, Any]]) -> "MatchConfig":
        """Builds a config from the 'checker' block of settings.json."""
        settings = settings or {}
        known = {k: settings[k] for k in cls.model_fields if k in settings}
        return cls(**known)

    def merged(self, options: Optional[Dict[str, Any]] = None, **overrides: Any) -> "MatchConfig":
        """
        Shallow override: every key given replaces the current value wholesale.
        Unknown keys (e.g. 'wait_time') are ignored.
        """
        data = {
            "patterns": list(self.patterns),
            "exclude_selectors": list(self.exclude_selectors),
            "allowed_keys": list(self.allowed_keys),
            "check_attributes": list(self.check_attributes),
            "fail_on_error": self.fail_on_error,
            "log_errors": self.log_errors,
        }
        for source in (options or {}, overrides):
            for key, value in source.items():
                if key in data:
                    data[key] = value
        return MatchConfig(**data)


class DestinationRecord(BaseModel):
    """
    The latest scan result of one destination (URL), as kept by the result store.
    """
    url: str
    errors: List[Defect] = Field(default_factory=list)
    test_context: str = ""
    scanned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("errors", mode="before")
    @classmethod
    def parse_errors(cls, v: Any) -> Any:
        """Accepts the JSON column value coming from a raw SQL row."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError as e:
                # A record that cannot be read must never count as a clean page.
                raise ValueError(f"unreadable errors column: {e}") from e
        return v or []

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class ReportSummary(BaseModel):
    total_pages: int
    clean_pages: int
    pages_with_issues: int
    # (url, test_context, issue count) per page with issues
    failing: List[Tuple[str, str, int]] = Field(default_factory=list)


class DestinationVerdict(BaseModel):
    url: str
    test_context: str
    passed: bool
    issue_count: int = 0
    details: List[str] = Field(default_factory=list)
    message: str = ""
