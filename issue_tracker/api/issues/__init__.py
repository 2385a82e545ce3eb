"""
Issues API module
"""
from .models import IssueCreate, IssueOut, IssueUpdate, IssueStatus, IssuePriority
from .service import IssueService

__all__ = [
    "IssueCreate",
    "IssueOut",
    "IssueUpdate",
    "IssueStatus",
    "IssuePriority",
    "IssueService",
]
