"""
core/log.py -- One-time logging setup shared by the API and the CLI.

Every module logs through a named logger under the "tokenauth." hierarchy
(tokenauth.api, tokenauth.auth, tokenauth.cli, ...). Handlers and format are
configured once here so both entry points produce the same line shape.

Tokens, passwords, password hashes and the signing secret are never passed
to a logger anywhere in the codebase.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger. Safe to call more than once."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, datefmt=DATE_FORMAT)
    logging.getLogger("tokenauth").setLevel(level.upper())
