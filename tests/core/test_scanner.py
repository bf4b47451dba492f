# tests/core/test_scanner.py
import logging

import pytest
from bs4 import BeautifulSoup

from translation_checker.dom.builder import DOMBuilder
from translation_checker.dom.scanner import DOMScanner
from translation_checker.model import DefectKind, MatchConfig


@pytest.fixture
def builder():
    return DOMBuilder()


@pytest.fixture
def scan(builder):
    """Parses the markup, picks the scan root and returns the defects found."""
    def _scan(html, **overrides):
        config = MatchConfig(log_errors=False).merged(**overrides)
        return DOMScanner(config).scan(builder.scan_root(builder.parse(html)))
    return _scan


def test_text_placeholder_in_span(scan):
    errors = scan("<html><body><span>{{user.name}}</span></body></html>")

    assert len(errors) == 1
    assert errors[0].kind is DefectKind.TEXT
    assert errors[0].text == "{{user.name}}"
    assert errors[0].element == "SPAN"
    assert errors[0].attribute is None
    assert errors[0].xpath == "/html/body/span"


def test_attribute_placeholder(scan):
    errors = scan('<html><body><input placeholder="i18n.search.placeholder"></body></html>')

    assert len(errors) == 1
    assert errors[0].kind is DefectKind.ATTRIBUTE
    assert errors[0].attribute == "placeholder"
    assert errors[0].text == "i18n.search.placeholder"
    assert errors[0].element == "INPUT"


def test_ignored_element_is_skipped(scan):
    errors = scan("<html><body><div data-translation-ignore>{{debug.key}}</div></body></html>")
    assert errors == []


def test_exclusion_covers_the_whole_subtree(scan):
    html = """
    <body>
      <section class="translation-ignore">
        <div><p><span title="{{deep.title}}">{{deep.key}}</span></p></div>
      </section>
      <p>{{visible.key}}</p>
    </body>
    """
    errors = scan(html)

    assert [e.text for e in errors] == ["{{visible.key}}"]


@pytest.mark.parametrize("tag", ["script", "style", "noscript"])
def test_default_excluded_tags(scan, tag):
    errors = scan(f"<html><body><{tag}>{{{{not.shown}}}}</{tag}></body></html>")
    assert errors == []


def test_clean_document_has_no_defects(scan):
    html = "<html><body><h1>Welcome</h1><img alt='Logo' src='x.png'><p title='Help'>Hello</p></body></html>"
    assert scan(html) == []


def test_defects_follow_document_order(scan):
    html = """
    <body>
      <div title="[[div.title]]">
        <p>COMMON.FIRST</p>
        <img alt="i18n.image.alt">
      </div>
      <button aria-label="$t('close')">{{close.label}}</button>
    </body>
    """
    errors = scan(html)

    assert [(e.kind.value, e.text) for e in errors] == [
        ("attribute", "[[div.title]]"),
        ("text", "COMMON.FIRST"),
        ("attribute", "i18n.image.alt"),
        ("attribute", "$t('close')"),
        ("text", "{{close.label}}"),
    ]


def test_comments_are_not_text(scan):
    errors = scan("<html><body><!-- {{todo.key}} --><p>ok</p></body></html>")
    assert errors == []


def test_text_is_trimmed(scan):
    errors = scan("<html><body><p>\n    {{padded.key}}   \n</p></body></html>")
    assert errors[0].text == "{{padded.key}}"


def test_only_configured_attributes_are_checked(scan):
    html = '<html><body><a href="{{link.href}}" title="{{link.title}}">Go</a></body></html>'

    assert [e.attribute for e in scan(html)] == ["title"]
    assert [e.attribute for e in scan(html, check_attributes=["href"])] == ["href"]


def test_allowed_keys_and_custom_exclusions(scan):
    html = '<html><body><p>ACME.CORP</p><div id="debug"><p>{{dev.only}}</p></div></body></html>'

    assert scan(html, allowed_keys=["ACME.CORP"], exclude_selectors=["#debug"]) == []


def test_fragment_is_scanned_inside_a_body(scan):
    errors = scan("<p>{{fragment.key}}</p>")
    assert len(errors) == 1
    assert errors[0].xpath == "/body/p"


def test_top_level_text_of_a_fragment(scan):
    errors = scan("{{top.key}}<p>ok</p>")

    assert len(errors) == 1
    assert errors[0].text == "{{top.key}}"
    assert errors[0].element == "BODY"
    assert errors[0].xpath == "/body"


def test_parsed_soup_without_body_is_scanned_from_the_root(builder):
    soup = BeautifulSoup("<section><p>{{given.soup}}</p></section>", "html.parser")
    errors = DOMScanner(MatchConfig(log_errors=False)).scan(builder.scan_root(soup))
    assert errors[0].xpath == "/section/p"


def test_absent_root_yields_empty_result():
    assert DOMScanner(MatchConfig()).scan(None) == []


def test_scan_does_not_modify_the_document(builder):
    soup = builder.parse("<html><body><p>{{a.b}}</p><input title='i18n.x'></body></html>")
    before = str(soup)

    DOMScanner(MatchConfig(log_errors=False)).scan(builder.scan_root(soup))

    assert str(soup) == before


def test_defect_dump_is_logged(builder, caplog):
    root = builder.scan_root(builder.parse('<html><body><input title="{{x.y}}"></body></html>'))

    with caplog.at_level(logging.ERROR, logger="translation_checker"):
        DOMScanner(MatchConfig()).scan(root)

    messages = [r.getMessage() for r in caplog.records]
    assert messages[0] == "=== Translation Issues Found ==="
    assert "1. ATTRIBUTE ISSUE:" in messages
    assert "   Attribute: title" in messages
    assert "Total issues found: 1" in messages


def test_no_dump_when_logging_disabled(builder, caplog):
    root = builder.scan_root(builder.parse("<html><body><p>{{x.y}}</p></body></html>"))

    with caplog.at_level(logging.ERROR, logger="translation_checker"):
        DOMScanner(MatchConfig(log_errors=False)).scan(root)

    assert caplog.records == []
