# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Logging setup shared by the providers and the CLI.

Each log record is tagged with the document currently being processed.  The
value lives in a context variable set through :class:`DocumentContext` and is
injected by :class:`DocumentContextFilter`.
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(document)s] %(message)s"
ROOT_LOGGER_NAME = "local_actions"

document_uri_var: ContextVar[str] = ContextVar("document_uri", default="")


class DocumentContext:
    """Accessors for the per-document logging context."""

    @staticmethod
    def set(uri: str) -> None:
        document_uri_var.set(uri)

    @staticmethod
    def get() -> str:
        return document_uri_var.get()

    @staticmethod
    def clear() -> None:
        document_uri_var.set("")

    @staticmethod
    @contextmanager
    def bind(uri: str) -> Iterator[None]:
        token = document_uri_var.set(uri)
        try:
            yield
        finally:
            document_uri_var.reset(token)


class DocumentContextFilter(logging.Filter):
    """Adds ``record.document`` from the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.document = document_uri_var.get()
        return True


def configure_logging(level: str = "WARNING", stream: Optional[object] = None) -> logging.Logger:
    """Attach a single stderr handler to the package logger and set *level*."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())
    for handler in logger.handlers:
        if getattr(handler, "_local_actions", False):
            handler.setLevel(level.upper())
            return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler._local_actions = True  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(DocumentContextFilter())
    logger.addHandler(handler)
    return logger
