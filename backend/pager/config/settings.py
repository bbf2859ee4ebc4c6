"""
Runtime settings for the pager package.

Every value can be overridden with an environment variable.
Read once at import time.
"""
import os
from pathlib import Path

# Database path used by pager.dependencies.get_db()
DATABASE_PATH = Path(os.environ.get("PAGER_DATABASE_PATH", "pager.db"))

# sqlite busy timeout in seconds
DB_TIMEOUT = int(os.environ.get("PAGER_DB_TIMEOUT", "30"))

# JSON file mapping operation names to SQL; optional
STATEMENTS_PATH = os.environ.get("PAGER_STATEMENTS_PATH") or None

LOG_LEVEL = os.environ.get("PAGER_LOG_LEVEL", "INFO")

# Calls slower than this are logged as slow_query warnings
SLOW_QUERY_MS = float(os.environ.get("PAGER_SLOW_QUERY_MS", "2000"))

# SQL text in log events is clipped to this many characters (0 = no limit)
LOG_SQL_CHARS = int(os.environ.get("PAGER_LOG_SQL_CHARS", "500"))
