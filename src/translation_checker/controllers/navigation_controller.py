# src/translation_checker/controllers/navigation_controller.py
import logging
from collections import deque
from typing import Deque, Optional, Protocol, Set

from bs4 import Tag

from translation_checker.dom.scanner import DOMScanner
from translation_checker.managers.result_store_manager import ResultStoreManager
from translation_checker.model import DEFAULT_WAIT_TIME, MatchConfig

logger = logging.getLogger(__name__)


class DocumentHost(Protocol):
    """What the tracker needs from the browser side."""

    def current_document(self) -> Optional[Tag]:
        """Returns the scan root of the live document."""
        ...

    def wait(self, ms: int) -> None:
        """Cooperative pause, in milliseconds."""
        ...


class NavigationTracker:
    """
    Decides when the live page gets scanned.

    Navigation signals only queue the destination; scans happen at checkpoints
    (after every test body, or on explicit request). Within one test, a
    destination is scanned at most once. Results go to the run-wide store,
    keyed by destination, together with the title of the current test.

    State is per test: `reset()` runs before every test body.
    """

    def __init__(
            self,
            store: ResultStoreManager,
            config: Optional[MatchConfig] = None,
            wait_time: int = DEFAULT_WAIT_TIME
    ):
        self.store = store
        # Automatic scans never fail the functional test and never dump to the log.
        self.config = (config or MatchConfig()).merged(fail_on_error=False, log_errors=False)
        self.scanner = DOMScanner(self.config)
        self.wait_time = wait_time

        self.visited_urls: Set[str] = set()
        self.last_url: Optional[str] = None
        self.pending: Deque[str] = deque()
        self.test_context: str = ""
        self.host: Optional[DocumentHost] = None

    @property
    def pending_check(self) -> bool:
        return bool(self.pending)

    # --- Host binding ---

    def attach(self, host: DocumentHost) -> None:
        self.host = host

    def detach(self) -> None:
        self.host = None

    # --- Events ---

    def reset(self, test_context: str = "") -> None:
        """Start-of-test: forget everything seen by the previous test."""
        self.visited_urls.clear()
        self.last_url = None
        self.pending.clear()
        self.test_context = test_context

    def on_url_changed(self, url: str) -> None:
        """Navigation signal. Repeated signals for the current URL are ignored."""
        if not url or url == self.last_url:
            return
        self.last_url = url
        self.pending.append(url)
        logger.debug("URL change queued for translation check: %s", url)

    def checkpoint(self) -> int:
        """
        Drains the queue of pending destinations in arrival order.

        Only the live destination can still be scanned; entries the page has
        already navigated away from are dropped. Returns the number of scans run.
        """
        if not self.pending:
            return 0

        if self.host is None:
            logger.warning(
                "Dropping %d pending translation check(s): no page attached.", len(self.pending)
            )
            self.pending.clear()
            return 0

        scans = 0
        while self.pending:
            url = self.pending.popleft()
            if url != self.last_url:
                logger.debug("Skipping %s: navigated away before the checkpoint.", url)
                continue
            if self._perform_check(url):
                scans += 1
        return scans

    def _perform_check(self, url: str) -> bool:
        if url in self.visited_urls:
            logger.debug("Already checked %s in this test.", url)
            return False

        logger.info(f"🔍 Checking translations for: {url}")

        if self.wait_time > 0:
            self.host.wait(self.wait_time)
        errors = self.scanner.scan(self.host.current_document())
        logger.info(f"Found {len(errors)} translation issues")

        self.store.put(url, errors, self.test_context)
        # Only a stored result counts as checked.
        self.visited_urls.add(url)
        return True
