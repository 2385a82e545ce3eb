"""
Live events module
"""
from .broadcaster import EventBroadcaster
from .models import IssueEventType

__all__ = ["EventBroadcaster", "IssueEventType"]
