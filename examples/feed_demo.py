import asyncio
import logging
from functools import wraps

from threads_app import Community, connect_to_db
from threads_app.actions import (
    add_comment_to_thread,
    create_thread,
    fetch_posts,
    fetch_thread_by_id,
    get_activity,
    update_user,
)

logging.basicConfig(level=logging.INFO)


def async_decorator(f):
    """Decorator to allow calling an async function like a sync function"""
    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))
    return wrapper


@async_decorator
async def main():
    # GOOGLE_CLOUD_PROJECT (and FIRESTORE_EMULATOR_HOST for local runs) come from the environment
    connect_to_db()

    alice = await update_user("user_alice", "Alice", "Alice Liddell", "Down the rabbit hole", "", "/onboarding")
    bob = await update_user("user_bob", "Bob", "Bob Builder", "", "", "/onboarding")
    await Community(external_id="org_py", username="python", name="Python").save()

    thread = await create_thread("Hello threads!", alice.id, "org_py", "/")
    await add_comment_to_thread(thread.id, "Welcome Alice", bob.id, f"/thread/{thread.id}")

    page = await fetch_posts(1, 10)
    for post in page.posts:
        print(post.author.name, "-", post.text, f"({len(post.children)} replies)")
    print("More pages:", page.is_next)

    full = await fetch_thread_by_id(thread.id)
    for reply in full.children:
        print("  reply by", reply.author.name, ":", reply.text)

    for reply in await get_activity(alice.id):
        print("Activity:", reply.author.name, "replied", reply.text)


if __name__ == "__main__":
    main()
