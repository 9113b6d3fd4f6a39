"""Process entry point for the storefront backend.

Reads settings, then serves the FastAPI app with uvicorn. Missing or invalid
configuration, or a failed demo-customer provisioning, exits with status 1.

Usage:
    python src/server.py
    python src/server.py --port 9090 --gateway fake
"""

import argparse
import os
import sys

import uvicorn

from payments.config import Settings
from shared.errors import ConfigurationError


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront checkout backend")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: PORT or 8080)")
    parser.add_argument(
        "--gateway",
        choices=["yuno", "fake"],
        help="Payment gateway adapter (default: GATEWAY or yuno)",
    )
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        print(f"Failed to start server: {exc.message}", file=sys.stderr)
        return 1

    if args.gateway:
        os.environ["GATEWAY"] = args.gateway

    from app import create_app

    config = uvicorn.Config(
        create_app(settings),
        host=args.host,
        port=args.port or settings.port,
        lifespan="on",
        log_config=None,
    )
    server = uvicorn.Server(config)
    server.run()
    # uvicorn reports a failed lifespan startup by leaving started unset
    return 0 if server.started else 1


if __name__ == "__main__":
    sys.exit(main())
