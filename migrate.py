#!/usr/bin/env python3
"""
Copy categories, category assignments and channel assignments onto a new channel

Required Environment Variables:
- BIGCOMMERCE_STORE_HASH
- BIGCOMMERCE_ACCESS_TOKEN
- BIGCOMMERCE_CHANNEL_ID

Required Access Token Scopes:
- store_v2_products
"""
import sys
from dotenv import load_dotenv
from config import Config
from exceptions import ConfigError
from logger import setup_logger, set_console_level
from migration_engine import MigrationEngine

logger = setup_logger("migration")


def main():
    load_dotenv()

    try:
        config = Config.from_env()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    set_console_level(config.log_level)
    logger.debug(f"Loaded {config!r}")

    engine = MigrationEngine(config)
    try:
        engine.run_migration()
    except Exception:
        logger.error("Migration aborted; remote changes made so far were not rolled back")
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
