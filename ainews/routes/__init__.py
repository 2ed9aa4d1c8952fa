"""
API route modules.
"""

from .articles import router as articles_router
from .misc import router as misc_router
from .rss import router as rss_router
from .user_lists import bookmarks_router, read_history_router, reading_list_router

__all__ = [
    "articles_router",
    "misc_router",
    "rss_router",
    "bookmarks_router",
    "reading_list_router",
    "read_history_router",
]
