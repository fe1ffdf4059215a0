"""Server actions for profiles, user search and activity feeds."""
import logging
import re
from typing import List, NamedTuple, Optional, Union

from ..cache import revalidate_path
from ..database import connect_to_db
from ..enums import OrderByDirection
from ..errors import ActionError
from ..models import Community, Thread, User
from ..population import Populate
from ..settings import get_settings

logger = logging.getLogger(__name__)


class UsersPage(NamedTuple):
    users: List[User]
    is_next: bool


async def update_user(
    user_id: str,
    username: str,
    name: str,
    bio: str,
    image: str,
    path: str,
) -> User:
    """Create or update the profile of the user with external id ``user_id``."""
    try:
        connect_to_db()

        user = await User.find_one_and_update(
            [User.external_id == user_id],
            {
                "username": username.lower(),
                "name": name,
                "bio": bio,
                "image": image,
                "onboarded": True,
            },
            upsert=True,
        )

        if path == get_settings().profile_edit_path:
            revalidate_path(path)
        return user
    except Exception as exc:
        raise ActionError("Failed to create/update user", str(exc)) from exc


async def fetch_user(user_id: str) -> Optional[User]:
    try:
        connect_to_db()

        return await User.find_one([User.external_id == user_id])
    except Exception as exc:
        raise ActionError("Failed to fetch user", str(exc)) from exc


def _matches(user: User, pattern: "re.Pattern[str]") -> bool:
    return bool(pattern.search(user.username or "") or pattern.search(user.name or ""))


async def fetch_users(
    user_id: str,
    search_string: str = "",
    page_number: int = 1,
    page_size: Optional[int] = None,
    sort_by: Union[OrderByDirection, str] = OrderByDirection.DESCENDING,
) -> UsersPage:
    """
    Everyone except ``user_id`` (an external id), optionally narrowed to
    users whose username or name contains ``search_string`` in any case.

    Firestore has no substring match, so candidates are read in creation
    order and filtered here before the page is cut.
    """
    try:
        connect_to_db()

        page_size = page_size or get_settings().page_size
        skip_amount = (page_number - 1) * page_size
        direction = OrderByDirection.parse(sort_by)

        candidates = await User.find_all(order_by=[(User.created_at, direction)])
        matching = [user for user in candidates if user.external_id != user_id]

        if search_string.strip() != "":
            pattern = re.compile(re.escape(search_string), re.IGNORECASE)
            matching = [user for user in matching if _matches(user, pattern)]

        total_user_count = len(matching)
        users = matching[skip_amount:skip_amount + page_size]

        is_next = total_user_count > skip_amount + len(users)

        return UsersPage(users=users, is_next=is_next)
    except Exception as exc:
        raise ActionError("Failed to fetch users", str(exc)) from exc


async def get_activity(user_id: str) -> List[Thread]:
    """
    Replies other users left on threads written by ``user_id`` (a document
    id), in the order the threads list them.
    """
    try:
        connect_to_db()

        user_threads = await Thread.find_all([Thread.author == user_id])

        child_thread_ids: List[str] = []
        for user_thread in user_threads:
            child_thread_ids.extend(user_thread.children)

        found = await Thread.get_many(child_thread_ids)
        replies = [
            found[child_id]
            for child_id in dict.fromkeys(child_thread_ids)
            if child_id in found and found[child_id].author != user_id
        ]

        await Thread.populate(replies, Populate("author", User, select=["name", "image", "id"]))
        return replies
    except Exception as exc:
        raise ActionError("Failed to fetch activity", str(exc)) from exc


async def fetch_user_posts(user_id: str) -> Optional[User]:
    """The user with external id ``user_id`` and their threads, replies included."""
    try:
        connect_to_db()

        user = await User.find_one([User.external_id == user_id])
        await User.populate(
            user,
            Populate(
                "threads",
                Thread,
                populate=[
                    Populate("community", Community, select=["name", "external_id", "image", "id"]),
                    Populate(
                        "children",
                        Thread,
                        populate=[Populate("author", User, select=["name", "image", "external_id"])],
                    ),
                ],
            ),
        )
        return user
    except Exception as exc:
        raise ActionError("Failed to fetch posts", str(exc)) from exc
