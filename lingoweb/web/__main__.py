"""Entry point for the web server.

Usage:
    python -m lingoweb.web [--port PORT] [--host HOST] [--config PATH]
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv


def main() -> int:
    """Run the web server."""
    parser = argparse.ArgumentParser(
        description="LingoWeb web interface",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to run the server on (default: server.port from config)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind to (default: server.host from config)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config.yaml",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    load_dotenv(Path(__file__).parent.parent.parent / ".env")
    if args.config:
        # The app factory runs in uvicorn and reads the path from the environment
        os.environ["LINGOWEB_CONFIG"] = str(args.config.absolute())

    # Import here to avoid loading FastAPI before parsing args
    import uvicorn

    from ..config import load_config
    from ..log import setup_logging

    setup_logging(verbose=args.verbose)
    config = load_config()
    host = args.host or config.server.host
    port = args.port or config.server.port

    print("Starting LingoWeb...")
    print(f"  Provider: {config.llm.provider} ({config.llm.model})")
    print(f"  Proxy: {config.proxy.kind}")
    print(f"  URL: http://{host}:{port}")
    print()

    uvicorn.run(
        "lingoweb.web.backend.app:create_app",
        host=host,
        port=port,
        reload=args.reload,
        factory=True,
    )

    return 0


if __name__ == "__main__":
    sys.exit(main())
