import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

OK_OUTCOMES = frozenset({"success"})


def get_logger(name: str, level: str | int = logging.INFO) -> logging.Logger:
    """Logger writing bare messages to stderr; repeated calls reuse the handler."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger


def action_record(
    module: str,
    action: str,
    actor_role: str | None,
    trace_id: str | None,
    outcome: str,
    level: int,
) -> dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": logging.getLevelName(level),
        "module": module,
        "action": action,
        "actor_role": actor_role,
        "trace_id": trace_id,
        "outcome": outcome,
    }


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    actor_role: str | None,
    trace_id: str | None,
    outcome: str,
) -> None:
    level = logging.INFO if outcome in OK_OUTCOMES else logging.WARNING
    logger.log(level, json.dumps(action_record(module, action, actor_role, trace_id, outcome, level)))
