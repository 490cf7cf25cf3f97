"""
Test Configuration

Environment setup runs before any application import so that modules reading
settings at import time (logging, key prefixes) see the test values.

Unit tests (test/**/unit/) use in-memory doubles from
test/service/play_arena/fakes.py and need no PostgreSQL, Kvrocks or Kafka.
Integration tests (test/**/integration/) run the repositories against
PostgreSQL in a separate test database.
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    if worker_id == 'master':
        os.environ['KVROCKS_KEY_PREFIX'] = 'test_'
    else:
        os.environ['KVROCKS_KEY_PREFIX'] = f'test_{worker_id}_'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('DEBUG', 'false')
    os.environ.setdefault('ARENA_TIMEZONE', 'UTC')
    os.environ.setdefault('MAX_FINAL_SCORE', '10000')

    if worker_id == 'master':
        os.environ['POSTGRES_DB'] = 'play_arena_test'
    else:
        os.environ['POSTGRES_DB'] = f'play_arena_test_{worker_id}'


_early_setup_test_environment()
