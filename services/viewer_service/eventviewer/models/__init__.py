"""
Database models package.

Other modules can import from here: `from eventviewer.models import Event`
"""

from eventviewer.models.event import Event

__all__ = [
    "Event",
]
