# src/translation_checker/plugin.py
"""
pytest entry point of the translation checker.

Registered through the `pytest11` entry point. Nothing is scanned automatically
until a conftest calls `enable_auto_translation_check(config, ...)`; from then
on every test that uses the Playwright `page` fixture is tracked.
"""
import logging
from typing import Any, Dict, Optional, Union

import pytest

from translation_checker.browser.page_binding import PageBinding
from translation_checker.commands import check_translations as _check_translations
from translation_checker.controllers.navigation_controller import NavigationTracker
from translation_checker.controllers.report_controller import ReportController
from translation_checker.errors import TrackerNotEnabled
from translation_checker.managers.config_manager import config_manager
from translation_checker.managers.database_manager import DatabaseManager
from translation_checker.managers.result_store_manager import ResultStoreManager
from translation_checker.model import MatchConfig
from translation_checker.utils.configure_logging import configure_logger
from translation_checker.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

REPORT_MARKER = "translation_report"

_store_key = pytest.StashKey[ResultStoreManager]()
_tracker_key = pytest.StashKey[NavigationTracker]()


# --- OPTIONS & CONFIGURATION ---

def pytest_addoption(parser):
    group = parser.getgroup("translation-checker", "untranslated i18n key detection")
    group.addoption(
        "--translation-db", dest="translation_db", default=None,
        help="SQLite file that collects scan results across the run.",
    )
    group.addoption(
        "--translation-wait", dest="translation_wait", type=int, default=None,
        help="Settle delay in ms between a navigation and its scan (default: 500).",
    )
    group.addoption(
        "--translation-keep-results", dest="translation_keep_results", action="store_true", default=False,
        help="Do not clear stored results at session start (validate in a separate run).",
    )
    group.addoption(
        "--translation-report", dest="translation_report", default=None,
        help="Export all stored results to this .csv or .xlsx file at session end.",
    )
    group.addoption(
        "--translation-log-level", dest="translation_log_level", default=None,
        help="Log level of the translation_checker loggers.",
    )
    parser.addini("translation_db", "SQLite file that collects scan results across the run.")
    parser.addini("translation_page_fixture", "Name of the Playwright page fixture.", default="page")


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        f"{REPORT_MARKER}: end-of-run translation validation; always runs after all other tests.",
    )
    level = config.getoption("translation_log_level") or config_manager.get_nested("debug.level", "WARNING")
    configure_logger(level)


def get_result_store(config: pytest.Config) -> ResultStoreManager:
    """Returns the run-wide result store, creating it on first use."""
    store = config.stash.get(_store_key, None)
    if store is None:
        db_path = config.getoption("translation_db") or config.getini("translation_db")
        if not db_path:
            db_path = PathUtils.get_results_db_path(
                config.rootpath,
                filename=config_manager.get_nested("store.filename"),
                dir_name=config_manager.get_nested("store.cache_dir"),
            )
        store = ResultStoreManager(DatabaseManager(db_path))
        config.stash[_store_key] = store
    return store


def get_tracker(config: pytest.Config) -> Optional[NavigationTracker]:
    return config.stash.get(_tracker_key, None)


def enable_auto_translation_check(
        config: pytest.Config,
        options: Optional[Union[Dict[str, Any], MatchConfig]] = None,
        wait_time: Optional[int] = None,
        **overrides: Any
) -> NavigationTracker:
    """
    Turns on automatic checking for the rest of the run. Call it from a
    conftest's `pytest_configure`.

    Args:
        config: The pytest config.
        options: A MatchConfig, or a dict of keys replacing the defaults. A
                 'wait_time' key is accepted here as well.
        wait_time: Settle delay in ms; overrides options and --translation-wait.
        **overrides: Same keys as `options`.

    Returns:
        NavigationTracker: The tracker, in case the caller wants to drive it.
    """
    if isinstance(options, MatchConfig):
        match_config = options.merged(**overrides)
        option_wait = overrides.get("wait_time")
    else:
        match_config = config_manager.get_match_config().merged(options, **overrides)
        option_wait = overrides.get("wait_time", (options or {}).get("wait_time"))

    if wait_time is None:
        wait_time = option_wait
    if wait_time is None:
        wait_time = config.getoption("translation_wait")
    if wait_time is None:
        wait_time = config_manager.get_wait_time()

    tracker = NavigationTracker(get_result_store(config), match_config, wait_time=int(wait_time))
    config.stash[_tracker_key] = tracker
    logger.debug("Automatic translation checking enabled (wait %d ms).", tracker.wait_time)
    return tracker


# --- SESSION LIFECYCLE ---

def is_xdist_worker(config: pytest.Config) -> bool:
    return hasattr(config, "workerinput")


def pytest_sessionstart(session):
    config = session.config
    if is_xdist_worker(config) or config.getoption("translation_keep_results"):
        return
    store = get_result_store(config)
    if store.db.exists():
        store.clear()


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(session, config, items):
    """Moves the validation tests behind every functional test."""
    report_items = [item for item in items if item.get_closest_marker(REPORT_MARKER)]
    if not report_items:
        return
    items[:] = [item for item in items if not item.get_closest_marker(REPORT_MARKER)] + report_items


def pytest_sessionfinish(session, exitstatus):
    config = session.config
    store = config.stash.get(_store_key, None)
    output = config.getoption("translation_report")

    if output and not is_xdist_worker(config):
        store = get_result_store(config)
        records = store.get_all()
        if records:
            ReportController(records).export(output)
        else:
            logger.info("No translation results to export.")

    if store is not None:
        store.db.close()


# --- PER TEST HOOKS ---

@pytest.hookimpl(tryfirst=True)
def pytest_runtest_setup(item):
    tracker = get_tracker(item.config)
    if tracker is not None:
        tracker.reset(test_context=item.name)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_call(item):
    yield
    tracker = get_tracker(item.config)
    if tracker is None or item.get_closest_marker(REPORT_MARKER):
        return
    try:
        tracker.checkpoint()
    except Exception as e:
        # Translation problems never fail the functional test.
        logger.error("Automatic translation check failed in %s: %s", item.nodeid, e, exc_info=True)


# --- FIXTURES ---

@pytest.fixture(autouse=True)
def _translation_page_binding(request):
    """Hooks the Playwright page of the current test into the tracker."""
    tracker = get_tracker(request.config)
    page_fixture = request.config.getini("translation_page_fixture") or "page"
    if tracker is None or page_fixture not in request.fixturenames:
        yield None
        return

    binding = PageBinding(request.getfixturevalue(page_fixture), tracker)
    binding.attach()
    yield binding
    binding.detach()


@pytest.fixture
def translation_tracker(request) -> NavigationTracker:
    tracker = get_tracker(request.config)
    if tracker is None:
        raise TrackerNotEnabled(
            "Automatic translation checking is not enabled; "
            "call enable_auto_translation_check(config) in pytest_configure."
        )
    return tracker


@pytest.fixture
def translation_checkpoint(translation_tracker):
    """Runs the pending checks now instead of after the test body."""
    return translation_tracker.checkpoint


@pytest.fixture
def translation_results(request) -> ResultStoreManager:
    return get_result_store(request.config)


@pytest.fixture
def check_translations(request):
    """
    On-demand scan. Without a source it scans the test's Playwright page.

        errors = check_translations(fail_on_error=False)
    """
    page_fixture = request.config.getini("translation_page_fixture") or "page"

    def _check(source=None, options=None, **overrides):
        if source is None and page_fixture in request.fixturenames:
            source = request.getfixturevalue(page_fixture)
        return _check_translations(source, options, **overrides)

    return _check
