"""Tests for the comment thread dialog."""

import pytest
from textual.widgets import Button, Input, Static

from tasklane.ui.comments import CommentsScreen, CommentView


@pytest.fixture
def app(host, gateway, tasks, owner, alice):
    users = gateway.users.list()
    return host(lambda app: CommentsScreen(app.gateway, tasks[0], users, owner["id"], audit=app.audit))


@pytest.mark.asyncio
async def test_empty_thread(app, settle):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        screen = app.screen
        assert str(screen.query_one("#assignee", Static).content) == "Not assigned"
        assert str(screen.query_one(".empty", Static).content) == "No comments yet."


@pytest.mark.asyncio
async def test_existing_comments_shown_with_authors(host, gateway, backend, tasks, owner, alice, settle):
    backend.comments.create({"taskId": tasks[0].id, "userId": alice["id"], "content": "From alice"})
    app = host(lambda app: CommentsScreen(app.gateway, tasks[0], [], owner["id"]))
    async with app.run_test() as pilot:
        await settle(app, pilot)
        (view,) = app.screen.query(CommentView)
        assert view.author.username == "alice"
        assert not view.mine
        assert not view.query(".comment-delete")


@pytest.mark.asyncio
async def test_post_and_delete_comment(app, settle, gateway, tasks):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        screen = app.screen
        screen.query_one("#new-comment", Input).value = "Looks good @alice"

        await screen.post()
        await settle(app, pilot)

        assert screen.query_one("#new-comment", Input).value == ""
        (view,) = screen.query(CommentView)
        assert view.mine
        assert [c.content for c in gateway.comments.list_for_task(tasks[0].id)] == ["Looks good @alice"]
        assert [c.content for c in screen.cache.comments] == ["Looks good @alice"]

        view.query_one(".comment-delete", Button).press()
        await settle(app, pilot)

        assert gateway.comments.list_for_task(tasks[0].id) == []
        assert not screen.query(CommentView)


@pytest.mark.asyncio
async def test_empty_comment_not_posted(app, settle, backend):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        before = len(backend.calls)
        await app.screen.post()
        assert len(backend.calls) == before
