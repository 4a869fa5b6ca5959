"""Markdown-it plugins for comments and task descriptions."""

from __future__ import annotations

import re
from collections.abc import Iterator

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from tasklane.model.entities import User
from tasklane.ui.constants import ICON_PERSON

_MENTION_RE = re.compile(r"(?<![\w@])@([A-Za-z0-9_.-]+)")


def mention_plugin(md: MarkdownIt, users: list[User]) -> None:
    """Core rule turning @username mentions of known users into ``user:<id>`` links."""
    by_name = {u.username.lower(): u for u in users}

    def link_mentions(state: StateCore) -> None:
        for block in state.tokens:
            if block.type == "inline" and block.children:
                block.children = list(_with_mentions(block.children, by_name))

    md.core.ruler.push("mention", link_mentions)


def _with_mentions(children: list[Token], by_name: dict[str, User]) -> Iterator[Token]:
    depth = 0
    for child in children:
        depth += {"link_open": 1, "link_close": -1}.get(child.type, 0)
        if child.type == "text" and depth == 0:
            yield from _split_text(child.content, by_name, child.level)
        else:
            yield child


def _split_text(text: str, by_name: dict[str, User], level: int) -> Iterator[Token]:
    pos = 0
    for found in _MENTION_RE.finditer(text):
        user = by_name.get(found.group(1).lower())
        if user is None:
            continue
        if found.start() > pos:
            yield _plain(text[pos : found.start()], level)
        yield from _user_link(user, level)
        pos = found.end()
    if pos < len(text) or not text:
        yield _plain(text[pos:], level)


def _user_link(user: User, level: int) -> Iterator[Token]:
    opener = Token("link_open", "a", 1, attrs={"href": f"user:{user.id}"}, level=level)
    yield opener
    yield _plain(f"{ICON_PERSON} {user.username}", level + 1)
    yield Token("link_close", "a", -1, level=level)


def _plain(content: str, level: int) -> Token:
    return Token("text", "", 0, content=content, level=level)


def tasklane_parser_factory(users: list[User] | None = None):
    """Parser factory for Textual's ``Markdown`` widget, with mentions when users are given."""

    def factory() -> MarkdownIt:
        md = MarkdownIt("gfm-like")
        if users:
            md.use(mention_plugin, users)
        return md

    return factory
