from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import logging.config
import os
import pathlib
import traceback
from datetime import datetime
from logging import LogRecord, Filter
from typing import Any, Callable

# $root/common/utils/json_logger.py
_ROOT_PATH = str(pathlib.Path(__file__).resolve().parents[2]) + os.sep

_LOG_CTX: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar("log_context", default=dict())


class Logger:
    @staticmethod
    def setup(level: str | None = None) -> None:
        """Plain text logging to stderr, replaced by the dictConfig from LOG_CFG_FILE if the file exists."""
        logging.basicConfig(
            level=level or os.environ.get("LOG_LEVEL", "INFO").upper(),
            format="%(asctime)s - pid:%(process)d [%(levelname)-.1s] %(filename)s:%(lineno)d - %(message)s",
        )

        cfg_path = pathlib.Path(os.environ.get("LOG_CFG_FILE", "log_cfg.json"))
        if cfg_path.is_file():
            logging.config.dictConfig(json.loads(cfg_path.read_text()))


def _short_path(pathname: str) -> str:
    return pathname[len(_ROOT_PATH) :] if pathname.startswith(_ROOT_PATH) else pathname


class JSONFormatter(logging.Formatter):
    """One JSON object per record: level, date, module, message and the fields of logging_context()."""

    def format(self, record: LogRecord) -> str:
        mask: Callable[[Any], Any] = getattr(record, "msg_filter", None) or (lambda v: v)

        msg_dict: dict[str, Any] = {
            "level": record.levelname,
            "date": datetime.fromtimestamp(record.created).isoformat(),
            "module": f"{_short_path(record.pathname)}:{record.lineno}",
            "message": self._format_message(record, mask),
        }
        msg_dict.update(getattr(record, "context", None) or dict())

        if record.exc_info:
            exc_type, exc, exc_tb = record.exc_info
            msg_dict["exc_info"] = {
                "type": str(exc_type),
                "error": mask(str(exc)),
                "traceback": [
                    line.strip().replace('"', "'").replace("\n", "; ").replace(_ROOT_PATH, "")
                    for line in traceback.format_tb(exc_tb)
                ],
            }

        return json.dumps(msg_dict, default=str)

    @staticmethod
    def _format_message(record: LogRecord, mask: Callable[[Any], Any]) -> str:
        if not isinstance(record.msg, dict):
            return mask(record.getMessage())

        # {"message": "template with {Key}", "Key": value, ...}
        arg_dict = {key: mask(value) for key, value in record.msg.items() if key != "message"}
        return record.msg.get("message", "").format(**arg_dict)


class ContextFilter(Filter):
    def filter(self, record: LogRecord) -> bool:
        record.context = _LOG_CTX.get()
        return True


@contextlib.contextmanager
def logging_context(**kwargs):
    token = _LOG_CTX.set(dict(_LOG_CTX.get(), **kwargs))
    try:
        yield
    finally:
        _LOG_CTX.reset(token)
