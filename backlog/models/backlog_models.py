"""
Pydantic model for backlog items.

A backlog item is identified by its natural key (title, category). There is no
store-assigned id; any ``_id`` a document store adds is dropped on decode.
"""
from typing import Any, Dict, Mapping, Tuple
from pydantic import BaseModel, ConfigDict, Field


NATURAL_KEY_FIELDS = ("title", "category")
DEFAULT_SORT_FIELD = "category"


class BacklogItem(BaseModel):
    """A single persisted backlog entry.

    Fields other than ``title`` and ``category`` belong to the caller's domain
    and are carried through the store untouched.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    title: str = Field(..., description="Human-readable name of the item")
    category: str = Field(..., description="Item classification, default sort key")

    def natural_key(self) -> Tuple[str, str]:
        """Return the (title, category) pair identifying this item."""
        return (self.title, self.category)

    def key_filter(self) -> Dict[str, str]:
        """Filter document matching stored copies of this item."""
        return {"title": self.title, "category": self.category}

    def same_key(self, other: "BacklogItem") -> bool:
        """Compare on natural key only, ignoring every other field."""
        return self.natural_key() == other.natural_key()

    def to_document(self) -> Dict[str, Any]:
        """Full field set, extra fields included, as a plain dict."""
        return self.model_dump()

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "BacklogItem":
        """
        Decode a stored document.

        Raises:
            pydantic.ValidationError: If the document does not have the item shape
        """
        fields = {key: value for key, value in document.items() if key != "_id"}
        return cls.model_validate(fields)
