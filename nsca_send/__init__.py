"""
Command line sender for NSCA passive checks.
"""

import argparse
import logging
import sys

from nsca import Client, Severity
from nsca.exceptions import InvalidConfigurationError, InvalidSeverityError

from nsca_send.config import load_settings
from nsca_send.logging_setup import setup_logging


def run(args: argparse.Namespace) -> int:
    """Send every message in args.message; returns the process exit code."""
    overrides = {
        "host": args.host,
        "port": args.port,
        "service_name": args.service,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}

    try:
        settings = load_settings(args.config, **overrides)
        level = Severity.parse(args.level)
    except (InvalidConfigurationError, InvalidSeverityError) as e:
        print(f"nsca_send: {e}", file=sys.stderr)
        return 2

    setup_logging(settings)
    logger = logging.getLogger("nsca-send")

    results = []
    try:
        client = Client.from_settings(settings, on_result=results.append)
    except InvalidConfigurationError as e:
        logger.critical(f"Cannot create channel: {e}")
        return 2

    with client:
        for message in args.message:
            client.send(level, message)

    failed = [result for result in results if not result.success]
    for result in failed:
        logger.error(f"'{result.alert.message}' not delivered: {result.error}")

    logger.info(f"Sent {len(results) - len(failed)}/{len(results)} alerts to {client.channel.address}")
    return 1 if failed else 0
