from pathlib import Path


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Log directory
LOG_DIR = BASE_DIR / 'logs'

# SQL schema applied at startup
SCHEMA_SQL_PATH = BASE_DIR / 'src' / 'platform' / 'database' / 'schema.sql'
