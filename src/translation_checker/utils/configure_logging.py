# src/translation_checker/utils/configure_logging.py
import logging
import sys

PACKAGE_LOGGER = "translation_checker"


class StderrHandler(logging.StreamHandler):
    """
    A handler bound to the *current* sys.stderr at emit time, so output still
    lands in pytest's captured stderr when capturing swaps the stream.
    """

    def __init__(self):
        super().__init__(sys.stderr)

    def emit(self, record):
        self.stream = sys.stderr
        super().emit(record)


def configure_logger(general_level='WARNING', module_specific_levels=None, silenced_loggers=None):
    """
    Configures the plugin's package logger (not the root logger, which pytest
    owns) with a single stderr handler.
    """
    # 1. Create the handler and a standard formatter.
    handler = StderrHandler()
    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
    )
    handler.setFormatter(formatter)

    # 2. Configure the package logger.
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    log_level = getattr(logging, general_level.upper(), logging.WARNING) if isinstance(general_level, str) else general_level
    package_logger.setLevel(log_level)

    # 3. Replace handlers from an earlier call.
    for existing in list(package_logger.handlers):
        if isinstance(existing, StderrHandler):
            package_logger.removeHandler(existing)
    package_logger.addHandler(handler)

    # 4. Configure levels for specific modules.
    if module_specific_levels:
        for name, level in module_specific_levels.items():
            level_to_set = getattr(logging, level.upper(), logging.INFO) if isinstance(level, str) else level
            logging.getLogger(name).setLevel(level_to_set)

    # 5. Muzzle noisy loggers by setting their level high.
    if silenced_loggers:
        for name, level in silenced_loggers.items():
            level_to_set = getattr(logging, level.upper(), logging.CRITICAL) if isinstance(level, str) else level
            logging.getLogger(name).setLevel(level_to_set)

    return package_logger
