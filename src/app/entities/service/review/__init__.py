"""Entity package: Review and the admin Reply attached to it."""

from .entity import Reply, Review
from .repository import ReplyRepository, ReviewRepository
from .table import ReplyTable, ReviewTable

__all__ = [
    "Reply",
    "ReplyRepository",
    "ReplyTable",
    "Review",
    "ReviewRepository",
    "ReviewTable",
]
