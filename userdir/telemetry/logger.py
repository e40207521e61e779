from __future__ import annotations

import logging
import sys
from pathlib import Path

from pythonjsonlogger import jsonlogger

from ..config import Settings, settings as default_settings

_TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _formatter(cfg: Settings) -> logging.Formatter:
    if cfg.log_format == "json":
        return jsonlogger.JsonFormatter(
            _JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    return logging.Formatter(_TEXT_FORMAT)


def configure_logging(cfg: Settings | None = None) -> None:
    """
    Route all logging to stdout and the audit logger to its append-only file.

    Safe to call more than once: handlers installed by an earlier call are
    replaced, not duplicated.
    """
    cfg = cfg or default_settings
    level = getattr(logging, cfg.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for h in [h for h in root.handlers if getattr(h, "_userdir", False)]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_formatter(cfg))
    handler._userdir = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    audit = logging.getLogger("userdir.audit")
    for h in list(audit.handlers):
        audit.removeHandler(h)
        h.close()

    log_dir = Path(cfg.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    audit_file = logging.FileHandler(log_dir / cfg.audit_log_file, mode="a", encoding="utf-8")
    audit_file.setFormatter(_formatter(cfg))
    audit.addHandler(audit_file)
    audit.setLevel(logging.INFO)
