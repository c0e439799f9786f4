"""Entry point for the people directory console.

This script starts the interactive console against the configured
people service.  It is intended to be executed from the project root,
where ``appsettings.json`` (see ``appsettings.example.json``) is picked
up if present.

Configuration such as the API base URL and token can also be given
through environment variables or command line flags, see
``python run.py --help``.

Usage:
    python run.py --base-url https://example.com/odata/
"""
import sys

from people_console import main


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
