"""Entry point for the passbridge server.

Usage:
    python -m passbridge [options]

Options:
    --host HOST             Interface to bind (default: 127.0.0.1)
    --port PORT             HTTP port (default: PASSBRIDGE_PORT or 8200)
    --binary PATH           Path to the bitwarden-cli binary (default: settings or /usr/bin/bw)
    --timeout MS            Timeout of CLI calls in ms, 5000-25000 (default: settings or 10000)
    --settings FILE         Settings file (default: ~/.passbridge/settings.json)
    --log-dir DIR           Also write logs to DIR
"""

import argparse
import logging
from pathlib import Path

import uvicorn

from .config import BrokerConfig
from .logging import get_logger, setup_logging
from .main import create_app

logger = get_logger("main")


def parse_args(argv=None) -> tuple[BrokerConfig, argparse.Namespace]:
    parser = argparse.ArgumentParser(description="passbridge password-manager broker")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=None, help="HTTP port")
    parser.add_argument("--binary", default="", help="Path to the bitwarden-cli binary")
    parser.add_argument("--timeout", type=int, default=None, help="Timeout of CLI calls (ms)")
    parser.add_argument("--settings", default=None, help="Settings file")
    parser.add_argument("--log-dir", default=None, help="Directory for log files")

    args = parser.parse_args(argv)

    config = BrokerConfig(
        binary_path=args.binary,
        exec_timeout_ms=args.timeout,
        host=args.host,
        port=args.port,
        settings_path=Path(args.settings) if args.settings else None,
    )
    return config, args


def main(argv=None):
    config, args = parse_args(argv)
    if args.log_dir:
        setup_logging(args.log_dir, file_level=logging.DEBUG)

    logger.info("passbridge starting")
    logger.info(f"  Manager:  {config.password_manager}")
    logger.info(f"  Binary:   {config.binary_path}")
    logger.info(f"  Timeout:  {config.exec_timeout_ms}ms")
    logger.info(f"  Address:  http://{config.host}:{config.port}")

    app = create_app(config)
    try:
        uvicorn.run(app, host=config.host, port=config.port, log_level="warning")
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
