"""
Command line entry point.

Every flag falls back to an environment variable, so the server can be
configured either way in a container:

    --port          MOCK_PORT           Port to run the server on (default: 8080)
    --host          MOCK_HOST           Address to bind (default: 0.0.0.0)
    --min-latency   MOCK_MIN_LATENCY    Minimum latency to simulate, e.g. 100ms
    --max-latency   MOCK_MAX_LATENCY    Maximum latency to simulate, e.g. 500ms
    --config        MOCK_CONFIG         Path to a JSON configuration file
    --log-level     MOCK_LOG_LEVEL      Logging level (default: INFO)
    --log-format    MOCK_LOG_FORMAT     "json" or "text" (default: json)

Explicit values take precedence over the config file.
"""

import argparse
import logging
import os
import sys

import uvicorn

from .config import ConfigError, parse_duration, resolve_config
from .logging_config import setup_logging
from .server import create_app

logger = logging.getLogger(__name__)


def _duration(text):
    try:
        return parse_duration(text)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser():
    env = os.environ.get
    parser = argparse.ArgumentParser(
        prog="openai-mock-server",
        description="OpenAI API compatible mock server with latency injection",
    )
    parser.add_argument("--port", type=int, default=env("MOCK_PORT"),
                        help="Port to run the server on")
    parser.add_argument("--host", default=env("MOCK_HOST"),
                        help="Address to bind the server to")
    parser.add_argument("--min-latency", type=_duration, default=env("MOCK_MIN_LATENCY"),
                        help="Minimum latency to simulate (e.g., 100ms)")
    parser.add_argument("--max-latency", type=_duration, default=env("MOCK_MAX_LATENCY"),
                        help="Maximum latency to simulate (e.g., 500ms)")
    parser.add_argument("--config", default=env("MOCK_CONFIG"),
                        help="Path to configuration file")
    parser.add_argument("--log-level", default=env("MOCK_LOG_LEVEL", "INFO"),
                        help="Logging level")
    parser.add_argument("--log-format", choices=["json", "text"], default=env("MOCK_LOG_FORMAT", "json"),
                        help="Log output format")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, json_format=args.log_format == "json")

    config = resolve_config(
        args.config,
        port=args.port,
        min_latency=args.min_latency,
        max_latency=args.max_latency,
        host=args.host,
    )
    app = create_app(config)

    logger.info("Starting OpenAI mock server on %s:%s", config.host, config.port)
    logger.info("Latency settings: min=%ss, max=%ss", config.min_latency, config.max_latency)
    # uvicorn logs bind errors itself and exits with its own startup-failure code
    try:
        uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    except SystemExit as e:
        if e.code in (None, 0):
            raise
        logger.critical("Failed to start server on %s:%s (uvicorn exit code %s)", config.host, config.port, e.code)
        sys.exit(1)


if __name__ == "__main__":
    main()
