import json
import logging
from datetime import datetime, timezone

SENSITIVE_KEYS = {"token", "password", "authorization"}


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    outcome: str,
    admin_id: str | int | None = None,
    duration_ms: int | None = None,
    **extra: object,
) -> None:
    record = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": "INFO" if outcome != "error" else "WARNING",
        "module": module,
        "action": action,
        "outcome": outcome,
        "admin_id": admin_id,
        "duration_ms": duration_ms,
    }
    for key, value in extra.items():
        if key.lower() in SENSITIVE_KEYS:
            continue
        record[key] = value
    level = logging.WARNING if outcome == "error" else logging.INFO
    logger.log(level, json.dumps(record, default=str))
