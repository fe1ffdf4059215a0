from .thread_actions import (
    PostsPage,
    add_comment_to_thread,
    create_thread,
    fetch_posts,
    fetch_thread_by_id,
)
from .user_actions import (
    UsersPage,
    fetch_user,
    fetch_user_posts,
    fetch_users,
    get_activity,
    update_user,
)

__all__ = [
    "PostsPage",
    "UsersPage",
    "add_comment_to_thread",
    "create_thread",
    "fetch_posts",
    "fetch_thread_by_id",
    "fetch_user",
    "fetch_user_posts",
    "fetch_users",
    "get_activity",
    "update_user",
]
