"""Server actions for creating and reading threads."""
import logging
from typing import List, NamedTuple, Optional

from ..cache import revalidate_path
from ..database import connect_to_db
from ..enums import OrderByDirection
from ..errors import ActionError, ThreadNotFoundError
from ..models import Community, Thread, User
from ..population import Populate
from ..settings import get_settings

logger = logging.getLogger(__name__)


class PostsPage(NamedTuple):
    posts: List[Thread]
    is_next: bool


def _top_level_filter():
    return [Thread.parent_id == None]  # noqa: E711


async def create_thread(text: str, author: str, community_id: Optional[str], path: str) -> Thread:
    """
    Post a new top-level thread.

    ``author`` is the author's document id and ``community_id`` the
    community's external id. The thread is linked from the author and, when
    the community exists, from the community. A missing author document is
    skipped. The writes are independent: a failure part-way leaves the
    earlier ones in place.
    """
    try:
        connect_to_db()

        community = None
        if community_id:
            community = await Community.find_one([Community.external_id == community_id])

        thread = Thread(
            text=text,
            author=author,
            community=community.id if community else None,
        )
        await thread.save()

        await User.push(author, "threads", thread.id)

        if community:
            await Community.push(community.id, "threads", thread.id)

        logger.info("Thread %s created by %s", thread.id, author)
        revalidate_path(path)
        return thread
    except Exception as exc:
        raise ActionError("Error creating thread", str(exc)) from exc


async def fetch_posts(page_number: int = 1, page_size: Optional[int] = None) -> PostsPage:
    """Newest top-level threads, one page at a time."""
    try:
        connect_to_db()

        page_size = page_size or get_settings().page_size
        skip_amount = (page_number - 1) * page_size

        posts = await Thread.find_all(
            filters=_top_level_filter(),
            order_by=[(Thread.created_at, OrderByDirection.DESCENDING)],
            offset=skip_amount,
            limit=page_size,
        )
        await Thread.populate(
            posts,
            Populate("author", User),
            Populate("community", Community),
            Populate(
                "children",
                Thread,
                populate=[Populate("author", User, select=["id", "name", "image"])],
            ),
        )

        total_posts_count = await Thread.count(_top_level_filter())
        is_next = total_posts_count > skip_amount + len(posts)

        return PostsPage(posts=posts, is_next=is_next)
    except Exception as exc:
        raise ActionError("Error fetching posts", str(exc)) from exc


async def fetch_thread_by_id(thread_id: str) -> Optional[Thread]:
    """A thread with its author, community and two levels of replies."""
    try:
        connect_to_db()

        thread = await Thread.find_by_id(thread_id)
        await Thread.populate(
            thread,
            Populate("author", User, select=["id", "external_id", "name", "image"]),
            Populate("community", Community, select=["id", "external_id", "name", "image"]),
            Populate(
                "children",
                Thread,
                populate=[
                    Populate("author", User, select=["id", "external_id", "name", "image"]),
                    Populate(
                        "children",
                        Thread,
                        populate=[Populate("author", User, select=["id", "external_id", "name", "image"])],
                    ),
                ],
            ),
        )
        return thread
    except Exception as exc:
        raise ActionError("Error fetching thread", str(exc)) from exc


async def add_comment_to_thread(thread_id: str, comment_text: str, user_id: str, path: str) -> Thread:
    """
    Reply to ``thread_id`` as ``user_id``.

    The reply is saved first, then its id is appended to the parent's
    ``children`` with an array union, so concurrent replies all stay linked.
    """
    try:
        connect_to_db()

        original_thread = await Thread.find_by_id(thread_id)
        if original_thread is None:
            raise ThreadNotFoundError(thread_id)

        comment_thread = Thread(
            text=comment_text,
            author=user_id,
            parent_id=thread_id,
        )
        await comment_thread.save()

        await Thread.push(thread_id, "children", comment_thread.id)

        logger.info("Reply %s added to thread %s", comment_thread.id, thread_id)
        revalidate_path(path)
        return comment_thread
    except Exception as exc:
        raise ActionError("Error adding comment to the thread", str(exc)) from exc
