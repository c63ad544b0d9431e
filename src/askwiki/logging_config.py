import logging
import logging.config
import os
import sys
from typing import Any

import structlog

from askwiki.config import settings


def _round_floats(value: Any) -> Any:
    if isinstance(value, float):
        return round(value, 2)
    if isinstance(value, dict):
        return {key: _round_floats(sub_value) for key, sub_value in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(_round_floats(item) for item in value)
    return value


def float_rounder(_: Any, __: str, event_dict: dict) -> dict:
    """Recursively round all float values in the log payload."""
    return {key: _round_floats(value) for key, value in event_dict.items()}


def _drop_request_id(_: Any, __: str, event_dict: dict) -> dict:
    event_dict.pop("request_id", None)
    return event_dict


def guess_stage(event: str | None, logger_name: str | None) -> str:
    value = (event or "").lower()
    logger_value = (logger_name or "").lower()
    if value.startswith(("wiki.", "http.")) or logger_value.startswith(("httpx", "httpcore")):
        return "web"
    if value.startswith(("pipeline.", "topic.", "analysis.")):
        return "pipeline"
    return "app"


COLOR_RESET = "\x1b[0m"
COLOR_GREEN = "\x1b[32m"
COLOR_YELLOW = "\x1b[33m"
COLOR_RED = "\x1b[31m"
STAGE_COLORS: dict[str, str] = {
    "web": "\x1b[36m",  # cyan
    "pipeline": "\x1b[35m",  # magenta
    "app": "\x1b[32m",  # green
}
STAGE_TAGS: dict[str, str] = {"web": "[WEB]", "pipeline": "[PIPE]", "app": "[APP]"}
KEY_ALIASES: dict[str, str] = {
    "latency_ms": "t_ms",
    "duration_ms": "t_ms",
    "key_points": "points",
    "status_code": "status",
}


def _colorize(text: str, stage: str, enabled: bool) -> str:
    color = STAGE_COLORS.get(stage)
    if not enabled or not color:
        return text
    return f"{color}{text}{COLOR_RESET}"


def _colorize_status(status: int, enabled: bool) -> str:
    if not enabled:
        return str(status)

    if status >= 500:
        color = COLOR_RED
    elif status >= 300:
        color = COLOR_YELLOW
    else:
        color = COLOR_GREEN
    return f"{color}{status}{COLOR_RESET}"


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, (int, float, bool)):
        return str(value)
    return repr(value)


def build_console_renderer(show_request_id: bool, colorize: bool):
    def renderer(_: Any, method_name: str, event_dict: dict) -> str:
        timestamp = event_dict.pop("timestamp", "")
        level = event_dict.pop("level", "").upper()
        event = event_dict.pop("event", "") or method_name
        logger_name = event_dict.pop("logger", None)
        exc_info = event_dict.pop("exception", None) or event_dict.pop("exc_info", None)

        if show_request_id and event_dict.get("request_id"):
            event_dict = {"request_id": event_dict.pop("request_id"), **event_dict}

        stage = guess_stage(event, logger_name)
        stage_tag = _colorize(STAGE_TAGS[stage], stage, colorize)

        kv_items: list[str] = []
        for key, value in event_dict.items():
            key = KEY_ALIASES.get(key, key)
            if key == "status" and isinstance(value, int):
                kv_items.append(f"{key}={_colorize_status(value, colorize)}")
            else:
                kv_items.append(f"{key}={_format_value(value)}")

        suffix = f" | {' '.join(kv_items)}" if kv_items else ""
        line = f"{timestamp} {stage_tag} [{level}] {_colorize(event, stage, colorize)}{suffix}"
        if exc_info:
            line = f"{line}\n{exc_info}"
        return line

    return renderer


def configure_logging() -> None:
    """Configure structlog on top of stdlib logging, console or JSON output."""
    log_level_name = os.getenv("LOG_LEVEL", settings.LOG_LEVEL).upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    is_debug_mode = log_level == logging.DEBUG
    render_json = settings.LOG_FORMAT.lower() == "json"

    renderer = (
        structlog.processors.JSONRenderer()
        if render_json
        else build_console_renderer(show_request_id=is_debug_mode, colorize=sys.stdout.isatty())
    )

    formatter_processors = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.processors.TimeStamper(fmt="iso" if render_json else "%H:%M:%S", utc=render_json),
    ]
    if not is_debug_mode:
        formatter_processors.append(float_rounder)
        if not render_json:
            formatter_processors.append(_drop_request_id)
    formatter_processors.extend([structlog.processors.format_exc_info, renderer])

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processors": formatter_processors,
                    "foreign_pre_chain": [
                        structlog.contextvars.merge_contextvars,
                        structlog.stdlib.add_logger_name,
                        structlog.stdlib.add_log_level,
                    ],
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "structlog",
                }
            },
            "loggers": {
                "uvicorn": {"handlers": ["console"], "level": logging.INFO, "propagate": False},
                "uvicorn.error": {"handlers": ["console"], "level": logging.INFO, "propagate": False},
                "uvicorn.access": {"handlers": ["console"], "level": logging.INFO, "propagate": False},
                "askwiki": {"handlers": ["console"], "level": log_level, "propagate": False},
            },
            "root": {"handlers": ["console"], "level": log_level},
        }
    )

    noisy_level = logging.DEBUG if is_debug_mode else logging.WARNING
    for noisy_logger in ("httpx", "httpcore", "asyncio"):
        logging.getLogger(noisy_logger).setLevel(noisy_level)
