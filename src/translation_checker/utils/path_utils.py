# src/translation_checker/utils/path_utils.py
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving the plugin's paths.
    """

    CACHE_DIR_NAME = ".translation_checker_cache"
    DEFAULT_DB_NAME = "translation_results.db"

    @staticmethod
    def get_package_root() -> Path:
        """Returns the directory of the translation_checker package (holds settings.json)."""
        return Path(__file__).resolve().parent.parent

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"

    @staticmethod
    def get_cache_root(rootdir: Optional[Union[str, Path]] = None, dir_name: Optional[str] = None) -> Path:
        """
        Returns the cache directory below the test run's root directory.
        (e.g., /path/to/project/.translation_checker_cache)
        """
        root = Path(rootdir) if rootdir else Path.cwd()
        return root / (dir_name or PathUtils.CACHE_DIR_NAME)

    @staticmethod
    def get_results_db_path(
            rootdir: Optional[Union[str, Path]] = None,
            filename: Optional[str] = None,
            dir_name: Optional[str] = None
    ) -> Path:
        """Returns the path to the SQLite file that holds the scan results."""
        return PathUtils.get_cache_root(rootdir, dir_name) / (filename or PathUtils.DEFAULT_DB_NAME)
