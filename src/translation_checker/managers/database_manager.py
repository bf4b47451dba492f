# src/translation_checker/managers/database_manager.py
import logging
import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Union

from translation_checker.database_schema import DEFAULT_SCHEMA_SCRIPT

logger = logging.getLogger(__name__)

# Thread-local storage to ensure SQLite connections are not shared across threads
thread_local_storage = threading.local()


class DatabaseManager:
    """
    A 'dumb' Database Manager.

    Responsibility:
        - Handles the SQLite connection lifecycle for one database file
          (opening, closing, caching per thread).
        - Executes raw SQL queries and scripts.
        - Manages database schema initialization via a constant.

    Constraints:
        - It does NOT contain business logic or data transformations.
        - The file is shared between pytest processes (xdist workers, separate
          invocations), so every write is committed immediately.
    """

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self._open_connections: List[sqlite3.Connection] = []
        self._conn_lock = threading.Lock()
        logger.debug("DatabaseManager initialized at: %s", self.db_path)

    # --- CONNECTION METHODS ---

    def exists(self) -> bool:
        return self.db_path.exists()

    def get_connection(self) -> sqlite3.Connection:
        """
        Retrieves a thread-local SQLite connection for the database file.
        Creates the database directory if it does not exist.
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        db_path_str = str(self.db_path)

        if not hasattr(thread_local_storage, 'connections'):
            thread_local_storage.connections = {}

        # Check for an existing healthy connection in this thread
        if db_path_str in thread_local_storage.connections:
            cached_conn = thread_local_storage.connections[db_path_str]
            try:
                cached_conn.execute("SELECT 1;")
                return cached_conn
            except sqlite3.Error:
                # Connection is dead, remove it and reconnect
                thread_local_storage.connections.pop(db_path_str, None)

        try:
            conn = sqlite3.connect(
                db_path_str,
                isolation_level=None,  # Autocommit mode
                check_same_thread=False,
                timeout=30
            )
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")

            thread_local_storage.connections[db_path_str] = conn
            with self._conn_lock:
                self._open_connections.append(conn)
            return conn
        except sqlite3.Error as e:
            logger.error(f"Fatal error opening DB {db_path_str}: {e}", exc_info=True)
            raise

    def close(self) -> None:
        """Closes all open connections and checkpoints the WAL into the database file."""
        db_path_str = str(self.db_path)
        with self._conn_lock:
            connections, self._open_connections = self._open_connections, []
        for conn in connections:
            try:
                conn.execute("PRAGMA wal_checkpoint(TRUNCATE);")
                conn.close()
            except sqlite3.Error as e:
                logger.debug(f"Could not checkpoint/close connection: {e}")

        if hasattr(thread_local_storage, 'connections'):
            thread_local_storage.connections.pop(db_path_str, None)

        logger.debug("Connections for %s closed.", db_path_str)

    # --- EXECUTION METHODS ---

    def execute_query(self, query: str, params: tuple = ()) -> None:
        """Executes a single SQL query that does not return data (e.g., UPDATE, DELETE)."""
        conn = self.get_connection()
        try:
            with conn:
                conn.execute(query, params)
        except sqlite3.Error as e:
            logger.error(f"Query failed: {e} | Query: {query}")
            raise

    def execute_script(self, script: str) -> None:
        """Executes a raw SQL script (multiple statements)."""
        conn = self.get_connection()
        try:
            with conn:
                conn.executescript(script)
        except sqlite3.Error as e:
            logger.error(f"Script execution failed: {e}")
            raise

    # --- READ METHODS ---

    def fetch_all(self, query: str, params: tuple = ()) -> List[tuple]:
        """Executes a query and returns all rows as a list of tuples."""
        conn = self.get_connection()
        try:
            cursor = conn.execute(query, params)
            return cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Fetch failed: {e}")
            raise

    def fetch_one(self, query: str, params: tuple = ()) -> Optional[tuple]:
        """Executes a query and returns a single row, or None."""
        conn = self.get_connection()
        cursor = conn.execute(query, params)
        return cursor.fetchone()

    # --- WRITE METHODS---

    def clear_tables(self, table_names: List[str]) -> None:
        """Deletes all rows from the specified tables."""
        if not table_names:
            return
        conn = self.get_connection()
        try:
            with conn:
                for table in table_names:
                    conn.execute(f"DELETE FROM {table}")
            logger.debug(f"Cleared tables: {', '.join(table_names)}")
        except sqlite3.Error as e:
            logger.error(f"Failed to clear tables {table_names}: {e}")
            raise

    # --- SCHEMA METHODS ---

    def init_schema(self) -> None:
        """Initializes the database schema using DEFAULT_SCHEMA_SCRIPT."""
        self.execute_script(DEFAULT_SCHEMA_SCRIPT)
