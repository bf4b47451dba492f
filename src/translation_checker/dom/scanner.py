# src/translation_checker/dom/scanner.py
import logging
from typing import List, Optional

import soupsieve
from bs4 import (
    BeautifulSoup,
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

from translation_checker.dom.matcher import Matcher
from translation_checker.dom.xpath import get_xpath
from translation_checker.model import Defect, DefectKind, MatchConfig

logger = logging.getLogger(__name__)

_NON_TEXT_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)


class DOMScanner:
    """
    Walks a BeautifulSoup tree depth-first (pre-order) and collects text and
    attribute values that look like unresolved translation keys.

    Excluded elements are skipped together with their whole subtree. An element
    counts as excluded when it, or any of its ancestors, matches one of the
    configured CSS selectors.
    """

    def __init__(self, config: MatchConfig):
        self.config = config
        self.matcher = Matcher(config)
        self._selectors = [soupsieve.compile(sel) for sel in config.exclude_selectors]

    def scan(self, root: Optional[Tag]) -> List[Defect]:
        """
        Scans the subtree under `root`.

        Args:
            root (Optional[Tag]): Usually the document <body>. None yields no defects.

        Returns:
            List[Defect]: Defects in document order; attribute defects of an
                          element come before anything found in its children.
        """
        errors: List[Defect] = []
        if root is None:
            return errors

        self._check_node(root, errors)

        if self.config.log_errors and errors:
            log_defects(errors)

        return errors

    def is_excluded(self, element: Tag) -> bool:
        """True if the element or one of its ancestors matches an exclude selector."""
        for selector in self._selectors:
            if selector.match(element) or selector.closest(element) is not None:
                return True
        return False

    def _check_node(self, node, errors: List[Defect]) -> None:
        if isinstance(node, NavigableString):
            # Comments, CDATA, doctypes and processing instructions are not text nodes.
            if isinstance(node, _NON_TEXT_STRINGS):
                return
            self._check_text(node, errors)
            return

        if not isinstance(node, Tag):
            return

        # The document object has no attributes and can never be excluded.
        if isinstance(node, BeautifulSoup):
            for child in list(node.children):
                self._check_node(child, errors)
            return

        self._check_attributes(node, errors)

        if not self.is_excluded(node):
            for child in list(node.children):
                self._check_node(child, errors)

    def _check_text(self, node: NavigableString, errors: List[Defect]) -> None:
        text = str(node).strip()
        if not text or not self.matcher.is_defect(text):
            return

        element = node.parent
        if element is None or isinstance(element, BeautifulSoup):
            return
        if self.is_excluded(element):
            return

        errors.append(Defect(
            kind=DefectKind.TEXT,
            text=text,
            element=element.name.upper(),
            xpath=get_xpath(element),
        ))

    def _check_attributes(self, element: Tag, errors: List[Defect]) -> None:
        for attr in self.config.check_attributes:
            value = element.get(attr)
            if isinstance(value, list):
                value = " ".join(value)
            if not value or not self.matcher.is_defect(value):
                continue
            if self.is_excluded(element):
                continue

            errors.append(Defect(
                kind=DefectKind.ATTRIBUTE,
                attribute=attr,
                text=value.strip(),
                element=element.name.upper(),
                xpath=get_xpath(element),
            ))


def log_defects(errors: List[Defect]) -> None:
    """Dumps a human-readable list of defects at ERROR level."""
    logger.error("=== Translation Issues Found ===")
    for index, error in enumerate(errors, start=1):
        logger.error(f"{index}. {error.kind.value.upper()} ISSUE:")
        if error.attribute:
            logger.error(f"   Attribute: {error.attribute}")
        logger.error(f"   Element: {error.element}")
        logger.error(f'   Text: "{error.text}"')
        logger.error(f"   XPath: {error.xpath}")
    logger.error(f"Total issues found: {len(errors)}")
