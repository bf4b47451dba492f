# src/translation_checker/browser/page_binding.py
"""Connects a Playwright page to the navigation tracker."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from bs4 import Tag
from playwright.sync_api import Frame, Page

from translation_checker.controllers.navigation_controller import NavigationTracker
from translation_checker.dom.builder import DOMBuilder

log = logging.getLogger(__name__)

IGNORED_URLS = frozenset({"about:blank", ""})


class PageBinding:
    """
    Feeds main-frame navigations of a Playwright page into a NavigationTracker
    and serves the live document back to it.

    Works for `page.goto`, link clicks, form posts and client-side redirects
    alike: the binding only listens to the `framenavigated` signal.
    """

    def __init__(self, page: Page, tracker: NavigationTracker, builder: Optional[DOMBuilder] = None) -> None:
        self.page = page
        self.tracker = tracker
        self.builder = builder or DOMBuilder()
        self._handler: Optional[Callable[[Frame], None]] = None

    def attach(self) -> None:
        if self._handler is not None:
            return
        self._handler = self._handle_frame_navigated
        self.page.on("framenavigated", self._handler)
        self.tracker.attach(self)

    def detach(self) -> None:
        if self._handler is None:
            return
        try:
            self.page.remove_listener("framenavigated", self._handler)
        except Exception as exc:  # page already closed
            log.debug("Could not remove framenavigated listener: %s", exc)
        self._handler = None
        if self.tracker.host is self:
            self.tracker.detach()

    # --- DocumentHost ---

    def current_document(self) -> Optional[Tag]:
        html = self.page.content()
        return self.builder.scan_root(self.builder.parse(html))

    def wait(self, ms: int) -> None:
        wait_for_timeout = getattr(self.page, "wait_for_timeout", None)
        if wait_for_timeout is None:
            time.sleep(ms / 1000)
            return
        wait_for_timeout(ms)

    # --- Events ---

    def _handle_frame_navigated(self, frame: Frame) -> None:
        if frame.parent_frame is not None:
            return
        url = frame.url
        if url in IGNORED_URLS:
            return
        self.tracker.on_url_changed(url)
