# src/translation_checker/dom/builder.py
import logging
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)


class DOMBuilder:
    """
    Turns rendered markup into a BeautifulSoup tree the scanner can walk.
    """

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def parse(self, html: Optional[str]) -> BeautifulSoup:
        """
        Parses raw HTML into a BeautifulSoup document.

        Args:
            html (Optional[str]): The rendered page source (e.g. `page.content()`).

        Returns:
            BeautifulSoup: The document; empty when no markup was given. Markup
                           without <html> or <body> is wrapped in a <body>.
        """
        if not html:
            return BeautifulSoup("", self.parser)

        # Basic cleanup of potentially dirty HTML (e.g., BOM)
        clean_html = html.replace("\ufeff", "").strip()
        soup = BeautifulSoup(clean_html, self.parser)

        # Fragments get a <body> so that top-level text has an owning element.
        if soup.find("html") is None and soup.find("body") is None:
            soup = BeautifulSoup(f"<body>{clean_html}</body>", self.parser)
        return soup

    @staticmethod
    def scan_root(doc: Optional[Union[BeautifulSoup, Tag]]) -> Optional[Tag]:
        """
        Picks the node a scan starts from: the <body> when the document has one,
        otherwise the given node itself (fragments, detached subtrees).
        """
        if doc is None:
            return None
        if isinstance(doc, BeautifulSoup):
            body = doc.body
            if body is not None:
                return body
            logger.debug("Document has no <body>; scanning from the document root.")
        return doc
