# tests/core/test_commands.py
import logging

import pytest

from translation_checker.commands import check_translations
from translation_checker.dom.builder import DOMBuilder
from translation_checker.errors import TranslationIssuesFound
from translation_checker.model import MatchConfig

BROKEN = "<html><body><h1>{{title}}</h1><img alt='i18n.logo'></body></html>"
CLEAN = "<html><body><h1>Title</h1></body></html>"


def test_raises_by_default_with_count_only_message():
    with pytest.raises(TranslationIssuesFound) as exc_info:
        check_translations(BROKEN, log_errors=False)

    assert str(exc_info.value) == "Found 2 translation issue(s) on the page. Check console for details."
    assert len(exc_info.value.errors) == 2
    # pytest reports it as a failed assertion in the calling step
    assert isinstance(exc_info.value, AssertionError)


def test_returns_errors_when_not_failing():
    errors = check_translations(BROKEN, {"fail_on_error": False, "log_errors": False})
    assert [e.text for e in errors] == ["{{title}}", "i18n.logo"]


def test_clean_page_returns_empty_list():
    assert check_translations(CLEAN) == []


def test_options_replace_defaults_wholesale():
    errors = check_translations(
        BROKEN, fail_on_error=False, log_errors=False, patterns=[r"i18n."], check_attributes=[]
    )
    # a plain string is a literal, and no attributes are looked at
    assert errors == []


def test_match_config_instance_is_used_as_is():
    config = MatchConfig(allowed_keys=["{{title}}"], fail_on_error=False, log_errors=False)
    errors = check_translations(BROKEN, config)
    assert [e.attribute for e in errors] == ["alt"]


def test_accepts_parsed_document_and_page(fake_page):
    soup = DOMBuilder().parse(BROKEN)
    assert len(check_translations(soup, fail_on_error=False, log_errors=False)) == 2

    fake_page.goto("https://shop.test/login")
    errors = check_translations(fake_page, fail_on_error=False, log_errors=False)
    assert [e.element for e in errors] == ["BUTTON"]


def test_none_source_has_nothing_to_scan():
    assert check_translations(None) == []


def test_details_go_to_the_log(caplog):
    with caplog.at_level(logging.ERROR, logger="translation_checker"):
        check_translations(BROKEN, fail_on_error=False)

    assert "=== Translation Issues Found ===" in caplog.text
    assert 'Text: "i18n.logo"' in caplog.text
