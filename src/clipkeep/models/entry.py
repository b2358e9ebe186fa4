# region Docstring
"""
clipkeep.models.entry
In-memory domain model for a single clipboard history entry.
Overview:
- Provides the Pydantic model held by the EntryRegistry. Every loaded entry has a
    memory id; only persisted entries have a disk id.
Contents:
- Constants:
    - TEXT_KIND: the only supported content kind.
- Pydantic models:
    - Entry:
        memory_id, disk_id, kind, text and favorite flag, plus helpers for reading the
        payload (`content`) and rendering a single-line preview (`preview`).
- Functions:
    - truncated(text, length) -> str
Design notes:
- `kind` is a closed Literal. Constructing or assigning any other kind raises
    UnsupportedContentKindError immediately instead of a validation error, and the
    `content` accessor re-checks the kind for instances built with model_construct.
- Linkage (previous/next) is not stored on the entry; the registry owns it.
"""
# endregion
# region Imports
import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clipkeep.errors import UnsupportedContentKindError

# endregion

TEXT_KIND: Literal["text"] = "text"

_WHITESPACE = re.compile(r"\s+")


def truncated(text: str, length: int) -> str:
    """
    Collapse whitespace and cut `text` to at most `length` characters.

    Args:
        text (str): The text to shorten.
        length (int): Maximum length of the result, including the "..." suffix.

    Returns:
        str: A single-line preview.

    Example:
        >>> truncated("hello\\n   world", 20)
        'hello world'
        >>> truncated("abcdefghij", 6)
        'abc...'
    """
    # Only look at a bounded prefix; mostly-whitespace text may come out short
    text = text[: length + 100]
    text = _WHITESPACE.sub(" ", text).strip()
    if len(text) > length:
        text = text[: length - 3] + "..."
    return text


# region Pydantic Model
class Entry(BaseModel):
    """
    A clipboard history entry.

    Attributes:
        memory_id (int): Session-local identity, dense 1..N after every compaction.
        disk_id (Optional[int]): Identity of the entry's log record, None when not persisted.
        kind (Literal["text"]): Content kind tag.
        text (str): The copied text.
        favorite (bool): Favorites are exempt from eviction and survive a clear.
    """

    memory_id: int = Field(..., description="Session-local identity of the entry")
    disk_id: Optional[int] = Field(
        None, description="Identity of the persisted log record, if any"
    )
    kind: Literal["text"] = Field(TEXT_KIND, description="Content kind")
    text: str = Field(..., description="The copied text")
    favorite: bool = Field(False, description="Whether the entry is a favorite")

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("kind", mode="before")
    @classmethod
    def _check_kind(cls, v):
        if v != TEXT_KIND:
            raise UnsupportedContentKindError(v)
        return v

    @property
    def content(self) -> str:
        if self.kind == TEXT_KIND:
            return self.text
        raise UnsupportedContentKindError(self.kind)

    @property
    def persisted(self) -> bool:
        return self.disk_id is not None

    def preview(self, length: int) -> str:
        return truncated(self.content, length)

    def __repr__(self) -> str:
        return (
            f"<Entry(memory_id={self.memory_id}, disk_id={self.disk_id}, "
            f"favorite={self.favorite}, text={truncated(self.text, 20)!r})>"
        )


# endregion

__all__ = ["Entry", "TEXT_KIND", "truncated"]
