# logging_utils.py
"""
logging_utils.py

Central logging utilities for the Recipe Recommender engine.

Log format (one line):
<RunId>|<Date>|<Time>|<Level>|<File:Line>|<Module.Func>|<ModulePurpose>|
<InvokingFunc>|<InvokingFuncPurpose>|<Detail>|<NextStep>|<Resolution>|<END>

Modules never configure handlers themselves; they ask for a logger through
get_logger() and describe each event with log_context():

    logger = get_logger(__name__)
    logger.info(
        "Interaction matrix rebuilt",
        extra=log_context(
            "build_matrices",
            "Snapshot user behaviour into a dense matrix",
            next_step="Recompute similarities on next lookup",
        ),
    )
"""

from __future__ import annotations

import datetime
import logging
import uuid
from typing import Dict

LOG_RUN_ID: str = uuid.uuid4().hex[:8]
# Alias for callers that use RUN_ID
RUN_ID: str = LOG_RUN_ID


def log_context(
    invoking_func: str,
    invoking_purpose: str,
    *,
    next_step: str = "",
    resolution: str = "",
) -> Dict[str, str]:
    """Build the `extra` mapping understood by StructuredFormatter."""
    return {
        "invoking_func": invoking_func,
        "invoking_purpose": invoking_purpose,
        "next_step": next_step,
        "resolution": resolution,
    }


class StructuredFormatter(logging.Formatter):
    """Render a record as a single '|' separated line (see module docstring)."""

    # High-level purposes by module name
    MODULE_PURPOSES: Dict[str, str] = {
        "config": "Load recommender settings from environment variables",
        "user_profile": "Maintain per-user static preferences, behaviour and context",
        "recipe_feature": "Maintain per-recipe structured tags and keyword weights",
        "content_based": "Score recipes against a user profile by tag overlap",
        "collaborative": "User/item collaborative filtering over the interaction matrix",
        "hybrid": "Blend content and collaborative recommendations with cold-start weights",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        stamp = datetime.datetime.fromtimestamp(record.created)
        module = record.module

        fields = [
            getattr(record, "run_id", RUN_ID),
            stamp.strftime("%Y-%m-%d"),
            stamp.strftime("%H:%M:%S"),
            record.levelname,
            f"{record.filename}:{record.lineno}",
            f"{module}.{record.funcName}",
            self.MODULE_PURPOSES.get(module, ""),
            getattr(record, "invoking_func", ""),
            getattr(record, "invoking_purpose", ""),
            record.getMessage(),
            getattr(record, "next_step", ""),
            getattr(record, "resolution", ""),
            "<END>",
        ]
        return "|".join(str(f) for f in fields)


def init_logging(level: int = logging.INFO) -> None:
    """
    Initialize root logger once with our StructuredFormatter.

    A root logger that already has handlers (REPL, notebooks, pytest, a host
    application) is left alone.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger that emits through the structured root handler."""
    init_logging()
    return logging.getLogger(name)
