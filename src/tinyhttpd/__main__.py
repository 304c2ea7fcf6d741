"""
=============================================================================
HTTP SERVER CLI ENTRY POINT
=============================================================================

    python -m tinyhttpd                       # Listen on 127.0.0.1:4221
    python -m tinyhttpd --directory /tmp/www  # Enable the /files routes

``--directory`` is the only option. The listen address is fixed at
127.0.0.1:4221.

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from .config import ServerConfig
from .server import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinyhttpd",
        description="Minimal HTTP/1.1 server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tinyhttpd                       # Run with defaults
  python -m tinyhttpd --directory ./data    # Serve and store files under ./data
        """
    )

    parser.add_argument(
        "--directory",
        type=str,
        default=None,
        help="Directory backing the /files/ routes (default: disabled)"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)

    try:
        server = create_app(ServerConfig(static_files=args.directory))
        server.run()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
