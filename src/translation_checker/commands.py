# src/translation_checker/commands.py
import logging
from typing import Any, Dict, List, Optional, Union

from bs4 import Tag

from translation_checker.dom.builder import DOMBuilder
from translation_checker.dom.scanner import DOMScanner
from translation_checker.errors import TranslationIssuesFound
from translation_checker.managers.config_manager import config_manager
from translation_checker.model import Defect, MatchConfig

logger = logging.getLogger(__name__)


def check_translations(
        source: Union[Any, str, Tag],
        options: Optional[Union[Dict[str, Any], MatchConfig]] = None,
        **overrides: Any
) -> List[Defect]:
    """
    Scans a page on demand and returns the defects found.

    Args:
        source: A Playwright page, raw HTML, or an already parsed BeautifulSoup node.
        options: A MatchConfig, or a dict of keys that replace the defaults
                 (e.g. {"fail_on_error": False, "allowed_keys": ["ACME.CORP"]}).
        **overrides: Same keys as `options`, as keyword arguments.

    Returns:
        List[Defect]: The defects, in document order.

    Raises:
        TranslationIssuesFound: If `fail_on_error` is set and anything was found.
    """
    if isinstance(options, MatchConfig):
        config = options.merged(**overrides)
    else:
        config = config_manager.get_match_config().merged(options, **overrides)

    errors = DOMScanner(config).scan(_resolve_root(source))

    if config.fail_on_error and errors:
        raise TranslationIssuesFound(errors)

    return errors


def _resolve_root(source: Union[Any, str, Tag]) -> Optional[Tag]:
    builder = DOMBuilder()
    if source is None:
        return None
    if isinstance(source, Tag):
        return builder.scan_root(source)
    if isinstance(source, str):
        return builder.scan_root(builder.parse(source))
    # Anything page-like: Playwright's Page (or a double) exposes content()
    return builder.scan_root(builder.parse(source.content()))
