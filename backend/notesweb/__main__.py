"""
Notes Web — Process Entry Point
================================

What:  `python -m notesweb [--listen-addr HOST:PORT]` starts the server.
How:   Parses the listen address, then runs the app under uvicorn. Every
       other setting (database URL, log level, ...) comes from Settings.

Examples:
    python -m notesweb                          # 0.0.0.0:8080
    python -m notesweb --listen-addr :9000      # 0.0.0.0:9000
    python -m notesweb --listen-addr 127.0.0.1:8080
"""

import argparse
import sys
from typing import List, Optional, Tuple

import uvicorn

from notesweb.config import settings


def parse_listen_addr(value: str, default_host: str) -> Tuple[str, int]:
    """
    Split "HOST:PORT" into its parts. An empty host (":8080") means
    `default_host`.

    Raises:
        argparse.ArgumentTypeError: missing colon or a non-numeric port.
    """
    host, sep, port = value.rpartition(":")
    if not sep or not port.isdigit():
        raise argparse.ArgumentTypeError(
            f"invalid listen address '{value}', expected HOST:PORT"
        )
    port_number = int(port)
    if not 0 < port_number < 65536:
        raise argparse.ArgumentTypeError(f"port out of range in '{value}'")
    return host.strip("[]") or default_host, port_number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notesweb", description="Serve the notes site.")
    parser.add_argument(
        "--listen-addr",
        default=f":{settings.backend_port}",
        help="server listen address (default: %(default)s)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        host, port = parse_listen_addr(args.listen_addr, settings.backend_host)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    uvicorn.run(
        "notesweb.main:app",
        host=host,
        port=port,
        log_config=None,  # notesweb.main.setup_logging owns logging
        timeout_keep_alive=15,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
