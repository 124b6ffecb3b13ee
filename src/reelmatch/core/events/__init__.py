"""Event channels for streaming job progress to observers."""

from __future__ import annotations

from .channel import ChannelEvent, EventChannel, EventHandler

__all__ = ["ChannelEvent", "EventChannel", "EventHandler"]
