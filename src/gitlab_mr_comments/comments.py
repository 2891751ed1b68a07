"""Flatten GitLab discussions into simple comment records."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TypeVar

from pydantic import BaseModel

from gitlab_mr_comments.gitlab.models import Discussion, Note


class CommentPayload(BaseModel):
    """A single merge request comment as returned by the tool."""

    file: str | None
    line: int | None
    text: str
    author: str | None
    created_at: str | None
    resolved: bool


T = TypeVar("T")


def _first_set(*values: T | None) -> T | None:
    """Return the first value that is not None.

    Falsy values such as 0 or "" count as set.
    """
    for value in values:
        if value is not None:
            return value
    return None


def is_visible(note: Note, include_resolved: bool = False) -> bool:
    """Whether a note should appear in the comment list.

    System notes are always hidden. Resolved notes of resolvable threads
    are hidden unless ``include_resolved`` is set.
    """
    # System notes (label changes, pushes) are never comments
    if note.system is True:
        return False
    # Only resolvable notes are subject to the resolved filter
    return include_resolved or not (note.resolvable is True and note.resolved is True)


def to_comment(note: Note) -> CommentPayload:
    """Project a note onto a comment, preferring new-side diff locations."""
    position = note.position
    author = note.author

    # New-side diff locations win; old side covers removed lines
    return CommentPayload(
        file=_first_set(position.new_path, position.old_path) if position else None,
        line=_first_set(position.new_line, position.old_line) if position else None,
        text=note.body if note.body is not None else "",
        author=_first_set(author.username, author.name) if author else None,
        created_at=note.created_at,
        resolved=note.resolved if note.resolved is not None else False,
    )


def iter_comments(
    discussions: Iterable[Discussion], include_resolved: bool = False
) -> Iterator[CommentPayload]:
    """Yield comments for visible notes, thread by thread.

    Lazy counterpart of flatten_discussions.
    """
    for discussion in discussions:
        for note in discussion.notes:
            if is_visible(note, include_resolved):
                yield to_comment(note)


def flatten_discussions(
    discussions: Iterable[Discussion], include_resolved: bool = False
) -> list[CommentPayload]:
    """Flatten discussions into comments, keeping thread and note order.

    Args:
        discussions: Discussions as listed by GitLab
        include_resolved: Keep notes of resolved threads

    Returns:
        One comment per visible note
    """
    return list(iter_comments(discussions, include_resolved))
