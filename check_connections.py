#!/usr/bin/env python3
"""
Verify the BigCommerce credentials before running a migration
"""
import sys
from dotenv import load_dotenv
from bigcommerce_client import BigCommerceClient
from config import Config
from exceptions import ConfigError
from logger import setup_logger


def main():
    load_dotenv()
    logger = setup_logger("connection_test")

    try:
        config = Config.from_env()
        logger.info("Configuration validation passed")
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return False

    logger.info(f"Testing BigCommerce connection to {config.api_origin}...")
    client = BigCommerceClient.from_config(config)
    success = client.test_connection()

    logger.info("=== Connection Test Results ===")
    logger.info(f"BigCommerce: {'SUCCESS' if success else 'FAILED'}")
    if not success:
        logger.error("Connection failed. Check your store hash, access token and token scopes.")
    return success


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
