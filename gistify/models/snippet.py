"""Persisted sync record for a single local file."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SnippetRecord(BaseModel):
    """State of one local file as of its last successful sync.

    Field aliases are the keys used in the ``.gistify`` state file.
    ``last_modified_at`` is the file's mtime when the record was produced, not
    the live mtime; comparing the two is how stale records are detected.
    """

    model_config = ConfigDict(populate_by_name=True)

    remote_id: str = Field(default="", alias="ID")
    remote_url: str = Field(default="", alias="URL")
    source_path: str = Field(alias="Filename")
    last_modified_at: int = Field(alias="Lastmod")
    is_public: bool = Field(default=False, alias="Public")

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with state-file keys, omitting an empty ID or URL."""
        data = self.model_dump(by_alias=True)
        if not self.remote_id:
            del data["ID"]
        if not self.remote_url:
            del data["URL"]
        return data
