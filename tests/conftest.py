# tests/conftest.py
from typing import Callable, Dict, List, Optional

import pytest


class FakeFrame:
    def __init__(self, url: str, parent_frame: Optional["FakeFrame"] = None):
        self.url = url
        self.parent_frame = parent_frame


class FakePage:
    """
    A minimal stand-in for Playwright's sync Page: it keeps framenavigated
    listeners, serves HTML per URL and records the waits it was asked for.
    """

    def __init__(self, pages: Optional[Dict[str, str]] = None):
        self.pages: Dict[str, str] = dict(pages or {})
        self.url = "about:blank"
        self.main_frame = FakeFrame(self.url)
        self.listeners: Dict[str, List[Callable]] = {}
        self.waits: List[int] = []

    def on(self, event: str, handler: Callable) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable) -> None:
        self.listeners.get(event, []).remove(handler)

    def emit(self, event: str, *args) -> None:
        for handler in list(self.listeners.get(event, [])):
            handler(*args)

    def goto(self, url: str) -> None:
        self.url = url
        self.main_frame.url = url
        self.emit("framenavigated", self.main_frame)

    def navigate_subframe(self, url: str) -> None:
        self.emit("framenavigated", FakeFrame(url, parent_frame=self.main_frame))

    def content(self) -> str:
        return self.pages.get(self.url, "<html><head></head><body></body></html>")

    def wait_for_timeout(self, ms: int) -> None:
        self.waits.append(ms)


@pytest.fixture
def fake_page():
    """Een nep-pagina met drie bestemmingen, waarvan twee met vertaalfouten."""
    return FakePage({
        "https://shop.test/": "<html><body><h1>Welcome</h1><p>All good here</p></body></html>",
        "https://shop.test/cart": "<html><body><h1>{{cart.title}}</h1>"
                                  "<input placeholder=\"i18n.cart.search\"></body></html>",
        "https://shop.test/login": "<html><body><button>$t('login.submit')</button></body></html>",
    })
