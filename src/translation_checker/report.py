# src/translation_checker/report.py
"""
End-of-run validation.

    # tests/test_zz_translations.py
    from translation_checker.report import create_translation_validation_tests

    TestTranslations = create_translation_validation_tests()

The generated class carries the `translation_report` marker, so the plugin
runs it after every functional test in the session. Under pytest-xdist the
validation belongs in a second, non-distributed run:

    pytest -n 4 --ignore=tests/test_zz_translations.py
    pytest tests/test_zz_translations.py --translation-keep-results
"""
import logging

import pytest

from translation_checker.controllers.report_controller import ReportController
from translation_checker.errors import TranslationValidationFailed
from translation_checker.plugin import REPORT_MARKER, get_result_store, is_xdist_worker

logger = logging.getLogger(__name__)

NO_PAGES_MESSAGE = "No pages were visited - run your functional tests first"
XDIST_WORKER_MESSAGE = (
    "Translation validation cannot run inside a pytest-xdist worker; "
    "run it in a separate invocation with --translation-keep-results"
)


def create_translation_validation_tests(name: str = "TestAutomaticTranslationValidation") -> type:
    """
    Builds the validation test class.

    Args:
        name: Class name; it must start with 'Test' for pytest to collect it.

    Returns:
        type: A test class with a summary test and a per-page validation test.
    """

    @pytest.fixture(scope="class")
    def report(self, request) -> ReportController:
        # Other workers may still be writing results.
        if is_xdist_worker(request.config):
            pytest.skip(XDIST_WORKER_MESSAGE)
        return ReportController(get_result_store(request.config).get_all())

    def test_collect_translation_results(self, report: ReportController):
        if report.is_empty:
            pytest.skip(NO_PAGES_MESSAGE)
        logger.warning(report.format_summary())

    def test_validate_each_page(self, report: ReportController):
        if report.is_empty:
            pytest.skip(NO_PAGES_MESSAGE)

        failures = report.failures()
        for verdict in failures:
            logger.error("\n".join(verdict.details))

        if failures:
            raise TranslationValidationFailed(
                "\n\n".join(verdict.message for verdict in failures),
                failed_urls=[verdict.url for verdict in failures],
            )

    cls = type(name, (), {
        "report": report,
        "test_collect_translation_results": test_collect_translation_results,
        "test_validate_each_page": test_validate_each_page,
    })
    return getattr(pytest.mark, REPORT_MARKER)(cls)
