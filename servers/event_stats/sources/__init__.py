"""
Event service facades.

Each facade implements:
- search(keyword) -> list[EventRecord], a single bounded request
- fetch_events(scope_id, ...) -> list[EventRecord], the full paginated listing
"""

from .connpass import ConnpassEvents
from .doorkeeper import DoorkeeperEvents
from .facebook import FacebookEvents

__all__ = [
    "ConnpassEvents",
    "DoorkeeperEvents",
    "FacebookEvents",
]
