"""CLI command modules.

Command Groups:
- comment: Reconcile declared PostgreSQL comments
"""

from .comment import comment_app

__all__ = [
    "comment_app",
]
