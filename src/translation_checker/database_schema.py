# src/translation_checker/database_schema.py

DEFAULT_SCHEMA_SCRIPT = """
CREATE TABLE IF NOT EXISTS translation_results (
    url TEXT PRIMARY KEY,    -- destination identifier, one row per destination
    test_context TEXT,       -- title of the test that produced the scan
    errors JSON NOT NULL,    -- list of serialized defects
    error_count INTEGER DEFAULT 0,
    scanned_at TEXT NOT NULL
);
"""
