# src/interncli/telemetry/logger/processors.py

"""
Custom structlog processors.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

LOG_EMOJIS: dict[int | str, str] = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
    "args": "🧩",
    "launch": "🚀",
    "watch": "👀",
    "fail": "🚫",
    "path": "📁",
    "success": "🎉",
    "general": "➡️",
}

# Keys that only matter to the processor chain and should never be rendered.
_INTERNAL_KEYS = ("emoji_key",)


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefixes the event with an emoji chosen by 'emoji_key' or by log level."""
    emoji_key: Any = event_dict.get("emoji_key")
    if emoji_key is None:
        level = logging.getLevelName(method_name.upper())
        emoji_key = level if isinstance(level, int) else "general"
    emoji = LOG_EMOJIS.get(emoji_key, LOG_EMOJIS["general"])
    event = event_dict.get("event")
    if isinstance(event, str):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for key in _INTERNAL_KEYS:
        event_dict.pop(key, None)
    return event_dict


# 🔼⚙️
