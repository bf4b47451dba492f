# tests/core/test_result_store.py
import json
import sqlite3
from typing import List

import pytest
from pydantic import ValidationError

from translation_checker.managers.database_manager import DatabaseManager
from translation_checker.managers.result_store_manager import ResultStoreManager
from translation_checker.model import Defect, DefectKind, DestinationRecord


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "cache" / "translation_results.db"


@pytest.fixture
def store(db_path):
    s = ResultStoreManager(DatabaseManager(db_path))
    yield s
    s.db.close()


def _defects(*texts: str) -> List[Defect]:
    return [Defect(kind=DefectKind.TEXT, text=t, element="P", xpath="/html/body/p") for t in texts]


def test_store_creates_database_lazily(db_path):
    store = ResultStoreManager(DatabaseManager(db_path))
    assert not store.db.exists()

    store.put("https://shop.test/", [], "test_home")

    assert store.db.exists()
    store.db.close()


def test_put_and_get(store):
    store.put("https://shop.test/cart", _defects("{{cart.title}}"), "test_cart")

    record = store.get("https://shop.test/cart")
    assert record.url == "https://shop.test/cart"
    assert record.test_context == "test_cart"
    assert record.error_count == 1
    assert record.errors[0].text == "{{cart.title}}"
    assert record.errors[0].kind is DefectKind.TEXT

    assert store.get("https://shop.test/missing") is None


def test_last_write_wins(store):
    store.put("https://shop.test/", _defects("{{a.b}}", "{{c.d}}"), "test_first")
    store.put("https://shop.test/", [], "test_second")

    records = store.get_all()
    assert len(records) == 1
    assert records[0].test_context == "test_second"
    assert not records[0].has_errors


def test_get_all_returns_one_record_per_destination(store):
    for url in ["https://shop.test/b", "https://shop.test/a", "https://shop.test/c", "https://shop.test/a"]:
        store.put(url, [], "test_walk")

    assert [r.url for r in store.get_all()] == [
        "https://shop.test/a",
        "https://shop.test/b",
        "https://shop.test/c",
    ]
    assert store.count() == 3


def test_clear(store):
    store.put("https://shop.test/", _defects("{{x.y}}"), "test_home")
    store.clear()

    assert store.get_all() == []
    assert store.count() == 0


def test_results_are_visible_to_another_manager(store, db_path):
    """A second manager on the same file stands in for the validation pass."""
    store.put("https://shop.test/login", _defects("$t('login.submit')"), "test_login")

    other = ResultStoreManager(DatabaseManager(db_path))
    records = other.get_all()
    other.db.close()

    assert [r.url for r in records] == ["https://shop.test/login"]
    assert records[0].errors[0].text == "$t('login.submit')"


def test_errors_are_serialized_with_public_field_names(store, db_path):
    attribute_defect = Defect(
        kind=DefectKind.ATTRIBUTE, attribute="title", text="i18n.tip", element="A", xpath='//*[@id="tip"]'
    )
    store.put("https://shop.test/", [attribute_defect], "test_home")

    conn = sqlite3.connect(str(db_path))
    try:
        raw = conn.execute("SELECT errors, error_count FROM translation_results").fetchone()
    finally:
        conn.close()

    assert json.loads(raw[0]) == [{
        "type": "attribute",
        "text": "i18n.tip",
        "attribute": "title",
        "element": "A",
        "xpath": '//*[@id="tip"]',
    }]
    assert raw[1] == 1


def test_corrupt_row_is_never_a_clean_page(store, caplog):
    store.put("https://shop.test/cart", _defects("{{cart.title}}"), "test_cart")
    store.db.execute_query(
        "UPDATE translation_results SET errors = ? WHERE url = ?", ("[{not json", "https://shop.test/cart")
    )

    with pytest.raises(ValidationError):
        store.get_all()

    assert "Corrupt translation result for https://shop.test/cart" in caplog.text


def test_record_rejects_unreadable_errors_column():
    with pytest.raises(ValidationError):
        DestinationRecord(url="https://shop.test/", errors="{{broken")

    assert DestinationRecord(url="https://shop.test/", errors="[]").errors == []
