"""Structured logging for channel events (subscribe, send, evict)."""

import logging
import sys
from typing import Any, MutableMapping, Optional, Tuple


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Return a configured logger; level defaults to TXRX_LOG_LEVEL."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        if level is None:
            from txrx.config import get_settings

            level = get_settings().log_level_no
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
            )
        )
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger


class ChannelLogger(logging.LoggerAdapter):
    """
    A shared txrx logger seen through one channel.

    Filters with the channel's own level instead of the shared logger's, so
    two channels with different settings do not overwrite each other. Every
    record carries the channel id in ``extra``.
    """

    def __init__(self, logger: logging.Logger, level: int, channel_id: Optional[str]) -> None:
        super().__init__(logger, {"channel": channel_id})
        self.level = level

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def isEnabledFor(self, level: int) -> bool:
        return level >= self.level and not self.logger.disabled

    def getEffectiveLevel(self) -> int:
        return self.level

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(level):
            msg, kwargs = self.process(msg, kwargs)
            # the shared logger's level belongs to whichever channel came first
            self.logger._log(level, msg, args, **kwargs)


def get_channel_logger(name: str, level: int, channel_id: Optional[str] = None) -> ChannelLogger:
    """Return the logger for name as seen by one channel at its own level."""
    return ChannelLogger(get_logger(name), level, channel_id)
