"""Typed records for the GitLab discussions API.

Only the fields used to build comments are modelled; everything else in
the API payload is ignored. All fields are optional because GitLab omits
or nulls them depending on the note type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Position(BaseModel):
    """Diff location a note is anchored to."""

    model_config = ConfigDict(extra="ignore")

    new_path: str | None = None
    old_path: str | None = None
    new_line: int | None = None
    old_line: int | None = None


class Author(BaseModel):
    """Note author."""

    model_config = ConfigDict(extra="ignore")

    username: str | None = None
    name: str | None = None


class Note(BaseModel):
    """A single note (comment) inside a discussion thread.

    Notes without a position are general, thread-level comments.
    """

    model_config = ConfigDict(extra="ignore")

    body: str | None = None
    system: bool | None = None
    resolvable: bool | None = None
    resolved: bool | None = None
    position: Position | None = None
    author: Author | None = None
    created_at: str | None = None


class Discussion(BaseModel):
    """A discussion thread on a merge request."""

    model_config = ConfigDict(extra="ignore")

    notes: list[Note] = Field(default_factory=list)

    @field_validator("notes", mode="before")
    @classmethod
    def normalize_notes(cls, v: Any) -> Any:
        """Treat a missing or non-list ``notes`` as empty.

        Entries that are not JSON objects, such as nulls or strings, are
        skipped.
        """
        if not isinstance(v, list):
            return []
        return [note for note in v if isinstance(note, (dict, Note))]
