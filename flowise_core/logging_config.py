"""Logging setup for the API server and for library callers.

Services log through ``logging.getLogger(__name__)`` and wrap work on a
single graph in ``log_context`` so every line names the workflow and node:

    with log_context(workflow="support-bot", node_id="llm"):
        logger.info("Applied 2 keys")

Library callers get plain stdlib logging; only ``setup_logging`` installs
handlers.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Iterator

workflow_var: ContextVar[str] = ContextVar("workflow_var", default="")
node_id_var: ContextVar[str] = ContextVar("node_id_var", default="")

STREAM_HANDLER_NAME = "_flowise_core_stream"
FILE_HANDLER_NAME = "_flowise_core_file"
WORKFLOW_LABEL_WIDTH = 32


@contextmanager
def log_context(workflow: str | None = None, node_id: str | None = None) -> Iterator[None]:
    """Tag log records emitted inside the block. ``None`` keeps the outer value."""
    tokens = []
    if workflow is not None:
        tokens.append((workflow_var, workflow_var.set(workflow)))
    if node_id is not None:
        tokens.append((node_id_var, node_id_var.set(node_id)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


class ContextFilter(logging.Filter):
    """Copies ``role`` and the current workflow/node onto each record."""

    def __init__(self, role: str) -> None:
        super().__init__()
        self.role = role

    def filter(self, record: logging.LogRecord) -> bool:
        record.role = self.role  # type: ignore[attr-defined]
        record.workflow = workflow_var.get()  # type: ignore[attr-defined]
        record.node_id = node_id_var.get()  # type: ignore[attr-defined]
        return True


class ContextFormatter(logging.Formatter):
    """``2026-10-19 14:30:01 [Server][Workflow support-bot][Node llm][INFO] module:88 - text``"""

    def format(self, record: logging.LogRecord) -> str:
        role = getattr(record, "role", "")
        workflow = getattr(record, "workflow", "")
        node_id = getattr(record, "node_id", "")

        prefix = f"[{role}]" if role else ""
        if workflow:
            prefix += f"[Workflow {workflow[:WORKFLOW_LABEL_WIDTH]}]"
        if node_id:
            prefix += f"[Node {node_id}]"
        prefix += f"[{record.levelname}]"

        line = f"{self.formatTime(record, self.datefmt)} {prefix} {record.name}:{record.lineno} - {record.getMessage()}"
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        extras = [text for text in (record.exc_text, record.stack_info) if text]
        return "\n".join([line, *extras])


def _attach(root: logging.Logger, handler: logging.Handler, name: str, role: str) -> None:
    handler.name = name
    handler.addFilter(ContextFilter(role))
    handler.setFormatter(ContextFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)


def setup_logging(role: str) -> None:
    """Install the stderr handler (and a rotating file handler when ``LOG_FILE`` is set).

    Calling it again is a no-op. For the ``Server`` role, uvicorn's loggers are
    routed through the root logger so they share the format.
    """
    from flowise_core.config import settings

    root = logging.getLogger()
    if any(getattr(h, "name", None) == STREAM_HANDLER_NAME for h in root.handlers):
        return

    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    _attach(root, logging.StreamHandler(sys.stderr), STREAM_HANDLER_NAME, role)

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            str(log_path),
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        _attach(root, file_handler, FILE_HANDLER_NAME, role)

    if role.lower() == "server":
        for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
            uv_logger = logging.getLogger(name)
            uv_logger.handlers.clear()
            uv_logger.propagate = True
