#!/usr/bin/env python3
"""Entry point for bravia2mqtt."""

import argparse
import logging
import sys

from bravia_tvos import BraviaOSPlatform, IncompatibleAPIError
from bravia_tvos.config import interval_ms, load_config, parse_tvs, validate_config
from bravia_tvos.storage import AccessoryCache

from . import __version__
from .host import MQTTHostAPI


def setup_logging(level: str = "INFO"):
    """Set up logging configuration."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from paho-mqtt
    logging.getLogger("paho").setLevel(logging.WARNING)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="bravia2mqtt",
        description="MQTT host for Sony Bravia TV accessories",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"bravia2mqtt {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate config and exit",
    )

    args = parser.parse_args()

    # Load config
    try:
        config = load_config(args.config)
    except OSError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    # Set up logging
    log_level = "DEBUG" if args.debug else config.get("options", {}).get("log_level", "INFO")
    setup_logging(log_level)

    logger = logging.getLogger(__name__)

    # Log config location
    config_path = config.get("_loaded_from") or "defaults"
    logger.info("Loaded config from: %s", config_path)

    # Validate config
    errors = validate_config(config, for_bridge=True)
    if errors:
        for error in errors:
            logger.error("Config error: %s", error)
        if args.validate:
            print("Configuration is INVALID")
        sys.exit(1)

    if args.validate:
        print("Configuration is valid")
        print(f"  MQTT Broker: {config['mqtt']['host']}:{config['mqtt']['port']}")
        print(f"  Poll Interval: {interval_ms(config.get('interval'))}ms")
        print(f"  Discovery: {config['options']['discovery']}")
        for tv in parse_tvs(config):
            print(f"  TV {tv.name}: {tv.ip}:{tv.port} (WoL: {tv.wol})")
        sys.exit(0)

    logger.info("bravia2mqtt v%s starting...", __version__)

    cache = AccessoryCache(config.get("options", {}).get("cache_path"))
    host = MQTTHostAPI(config, cache=cache)

    try:
        platform = BraviaOSPlatform(logging.getLogger("bravia_tvos"), config, host)
    except IncompatibleAPIError as e:
        logger.error("%s", e)
        sys.exit(1)

    try:
        host.run_forever(platform)
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
