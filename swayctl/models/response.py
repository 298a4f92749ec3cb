"""
Command response models.

The primary control binary answers a command message with a JSON array that
holds one status object per ``;``-separated sub-command, in send order:

    [{"success": true}, {"success": false, "parse_error": true, "error": "..."}]

Sub-commands run independently; a later failure does not undo an earlier
success.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ResponseFormatError


class StatusEntry(BaseModel):
    """Outcome of a single sub-command.

    Unknown keys are kept in the extra side-table so the raw entry can be
    echoed in diagnostics.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    success: bool = Field(default=False, description="Sub-command succeeded")
    error: Optional[str] = Field(default=None, description="Error message from the control process")
    parse_error: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("parse_error", "parseError"),
        description="The control process could not parse the sub-command",
    )

    @field_validator("success", mode="before")
    @classmethod
    def coerce_success(cls, v: Any) -> bool:
        """Any falsy value, null included, is a failure."""
        return bool(v)

    @field_validator("parse_error", mode="before")
    @classmethod
    def coerce_parse_error(cls, v: Any) -> Optional[bool]:
        return None if v is None else bool(v)

    @field_validator("error", mode="before")
    @classmethod
    def stringify_error(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return v if isinstance(v, str) else json.dumps(v)

    def raw(self) -> str:
        """Compact JSON rendering of the entry, extras included."""
        return json.dumps(self.model_dump(mode="json", exclude_none=True), sort_keys=True)


class BatchResponse(BaseModel):
    """Ordered status entries for one command message.

    Example:
        >>> batch = BatchResponse.from_json([{"success": True}, {"success": False, "error": "x"}])
        >>> batch.success
        False
        >>> [e.error for e in batch.failures]
        ['x']
    """

    model_config = ConfigDict(frozen=True)

    entries: Tuple[StatusEntry, ...] = Field(default_factory=tuple)

    @property
    def success(self) -> bool:
        """True iff every entry succeeded."""
        return all(entry.success for entry in self.entries)

    @property
    def failures(self) -> Tuple[StatusEntry, ...]:
        return tuple(entry for entry in self.entries if not entry.success)

    @property
    def has_parse_error(self) -> bool:
        return any(entry.parse_error for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_json(cls, data: Any) -> BatchResponse:
        """Build a batch from decoded JSON.

        A bare object is treated as a one-entry batch.

        Raises:
            ResponseFormatError: If data is not a list of objects
        """
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            raise ResponseFormatError(
                f"expected a JSON array of status objects, got {type(data).__name__}",
                json.dumps(data),
            )

        try:
            return cls(entries=tuple(StatusEntry.model_validate(item) for item in data))
        except ValidationError as e:
            raise ResponseFormatError(f"malformed status entry: {e}", json.dumps(data))
