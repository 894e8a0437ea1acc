"""
Record type and snapshot serialization for tinylink.

On-disk document (UTF-8 JSON):

    {
      "definitions": [
        {"key": "2s", "alias": null, "targetUrl": "http://example.com"},
        {"key": "k9", "alias": "demo", "targetUrl": "http://a.com"}
      ]
    }

Notes:
    - "no alias" is written as null; null, a missing field and a blank string
      all read back as None.
    - Aliases are lowercased on the way in, so the stored value is already the
      normalized lookup form.
"""

from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Record(BaseModel):
    """One key/alias -> target URL mapping. Immutable once created."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str
    alias: Optional[str] = None
    target_url: str = Field(alias="targetUrl")

    @field_validator("alias", mode="before")
    @classmethod
    def _normalize_alias(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    @property
    def index_field(self) -> str:
        """Name of the index this record lives in: "alias" or "key"."""
        return "alias" if self.alias else "key"


class LinkDefinitions(BaseModel):
    """Top-level snapshot document."""

    definitions: List[Record] = Field(default_factory=list)


def dumps_snapshot(records: Iterable[Record]) -> str:
    """Serialize records (in order) to the snapshot JSON text."""
    return LinkDefinitions(definitions=list(records)).model_dump_json(by_alias=True, indent=2)


def loads_snapshot(text: str) -> List[Record]:
    """
    Parse snapshot JSON text into records.

    Raises:
        pydantic.ValidationError: On malformed JSON or a document that does not
        match the snapshot shape.
    """
    return LinkDefinitions.model_validate_json(text).definitions


def empty_snapshot() -> str:
    return dumps_snapshot([])
