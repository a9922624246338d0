"""Publish-cycle triggers."""

from .time_trigger import IntervalTrigger

__all__ = [
    'IntervalTrigger',
]
