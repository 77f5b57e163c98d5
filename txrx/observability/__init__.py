"""Observability: logging and metrics for channels."""

from txrx.observability.logger import ChannelLogger, get_channel_logger, get_logger
from txrx.observability.metrics import Metrics

__all__ = ["ChannelLogger", "get_channel_logger", "get_logger", "Metrics"]
