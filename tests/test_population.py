import pytest

from threads_app import Community, Populate, Thread, User

pytestmark = pytest.mark.asyncio


async def _user(name="alice"):
    return await User(external_id=f"ext_{name}", username=name, name=name.title(), image=f"{name}.png").save()


async def test_single_reference_is_replaced_by_document(firestore_db):
    author = await _user()
    thread = await Thread(text="hi", author=author.id).save()

    await Thread.populate(thread, Populate("author", User))

    assert isinstance(thread.author, User)
    assert thread.author.id == author.id
    assert thread.author.username == "alice"


async def test_dangling_single_reference_becomes_none(firestore_db):
    thread = await Thread(text="hi", author="ghost", community="nowhere").save()

    await Thread.populate(thread, Populate("author", User), Populate("community", Community))

    assert thread.author is None
    assert thread.community is None


async def test_dangling_list_entries_are_dropped(firestore_db):
    author = await _user()
    reply = await Thread(text="re", author=author.id).save()
    thread = await Thread(text="hi", author=author.id, children=[reply.id, "deleted"]).save()

    await Thread.populate(thread, Populate("children", Thread))

    assert [child.id for child in thread.children] == [reply.id]


async def test_select_returns_partial_documents(firestore_db):
    author = await _user()
    thread = await Thread(text="hi", author=author.id).save()

    await Thread.populate(thread, Populate("author", User, select=["id", "name"]))

    assert thread.author.id == author.id
    assert thread.author.name == "Alice"
    assert thread.author.image is None
    assert thread.author.onboarded is None
    assert thread.author.threads is None
    assert thread.author.created_at is None
    assert thread.author.model_fields_set == {"id", "name"}


async def test_nested_directives_resolve_each_level_once(firestore_db, fake_firestore):
    alice = await _user("alice")
    bob = await _user("bob")
    reply_a = await Thread(text="a", author=bob.id).save()
    reply_b = await Thread(text="b", author=bob.id).save()
    threads = [
        await Thread(text="one", author=alice.id, children=[reply_a.id]).save(),
        await Thread(text="two", author=alice.id, children=[reply_b.id]).save(),
    ]
    calls_before = fake_firestore.get_all_calls

    await Thread.populate(
        threads,
        Populate("children", Thread, populate=[Populate("author", User, select=["name"])]),
    )

    # one read for the replies, one for their authors
    assert fake_firestore.get_all_calls - calls_before == 2
    assert threads[0].children[0].author.name == "Bob"
    assert threads[1].children[0].author.name == "Bob"


async def test_select_keeps_paths_needed_by_nested_directives(firestore_db):
    directive = Populate("threads", Thread, select=["text"], populate=[Populate("author", User)])
    assert directive.fetched_fields() == ["text", "author"]


async def test_none_documents_are_skipped(firestore_db):
    assert await Thread.populate(None, Populate("author", User)) is None


async def test_populated_document_saves_reference_ids(firestore_db, fake_firestore):
    author = await _user()
    reply = await Thread(text="re", author=author.id).save()
    thread = await Thread(text="hi", author=author.id, children=[reply.id]).save()
    await Thread.populate(thread, Populate("author", User), Populate("children", Thread))

    await thread.update()

    stored = fake_firestore.collections["threads"][thread.id]
    assert stored["author"] == author.id
    assert stored["children"] == [reply.id]
