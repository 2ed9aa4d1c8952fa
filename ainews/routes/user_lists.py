"""
Per-user article lists: bookmarks, reading list and read history.

The caller is identified by the X-User-Id header.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from ..auth import get_user_id, verify_api_key
from ..config import get_db
from ..database import Database
from ..exceptions import require_article
from ..schemas import MembershipResponse, UserArticleResponse

bookmarks_router = APIRouter(
    prefix="/bookmarks",
    tags=["bookmarks"],
    dependencies=[Depends(verify_api_key)]
)

reading_list_router = APIRouter(
    prefix="/reading-list",
    tags=["reading-list"],
    dependencies=[Depends(verify_api_key)]
)

read_history_router = APIRouter(
    prefix="/read-history",
    tags=["read-history"],
    dependencies=[Depends(verify_api_key)]
)

UserId = Annotated[int, Depends(get_user_id)]
Db = Annotated[Database, Depends(get_db)]


# ─────────────────────────────────────────────────────────────
# Bookmarks
# ─────────────────────────────────────────────────────────────

@bookmarks_router.get("")
async def list_bookmarks(user_id: UserId, db: Db) -> list[UserArticleResponse]:
    """Bookmarked articles, newest bookmark first."""
    return [UserArticleResponse.from_db(item) for item in db.get_bookmarks(user_id)]


@bookmarks_router.post("/{article_id}")
async def add_bookmark(article_id: int, user_id: UserId, db: Db) -> dict:
    require_article(db.get_article(article_id))
    db.add_bookmark(user_id, article_id)
    return {"success": True}


@bookmarks_router.delete("/{article_id}")
async def remove_bookmark(article_id: int, user_id: UserId, db: Db) -> dict:
    return {"success": db.remove_bookmark(user_id, article_id)}


@bookmarks_router.get("/{article_id}")
async def is_bookmarked(article_id: int, user_id: UserId, db: Db) -> MembershipResponse:
    return MembershipResponse(value=db.is_bookmarked(user_id, article_id))


# ─────────────────────────────────────────────────────────────
# Reading List
# ─────────────────────────────────────────────────────────────

@reading_list_router.get("")
async def list_reading_list(user_id: UserId, db: Db) -> list[UserArticleResponse]:
    """Articles saved for later, newest first."""
    return [UserArticleResponse.from_db(item) for item in db.get_reading_list(user_id)]


@reading_list_router.post("/{article_id}")
async def add_to_reading_list(article_id: int, user_id: UserId, db: Db) -> dict:
    require_article(db.get_article(article_id))
    db.add_to_reading_list(user_id, article_id)
    return {"success": True}


@reading_list_router.delete("/{article_id}")
async def remove_from_reading_list(article_id: int, user_id: UserId, db: Db) -> dict:
    return {"success": db.remove_from_reading_list(user_id, article_id)}


@reading_list_router.get("/{article_id}")
async def is_in_reading_list(article_id: int, user_id: UserId, db: Db) -> MembershipResponse:
    return MembershipResponse(value=db.is_in_reading_list(user_id, article_id))


# ─────────────────────────────────────────────────────────────
# Read History
# ─────────────────────────────────────────────────────────────

@read_history_router.get("")
async def list_read_history(user_id: UserId, db: Db) -> list[UserArticleResponse]:
    """Articles the user has read, most recently read first."""
    return [UserArticleResponse.from_db(item) for item in db.get_read_history(user_id)]


@read_history_router.post("/{article_id}")
async def mark_read(article_id: int, user_id: UserId, db: Db) -> dict:
    """Record a read; reading again refreshes the timestamp."""
    require_article(db.get_article(article_id))
    db.mark_read(user_id, article_id)
    return {"success": True}


@read_history_router.get("/{article_id}")
async def is_read(article_id: int, user_id: UserId, db: Db) -> MembershipResponse:
    return MembershipResponse(value=db.is_read(user_id, article_id))
