"""Base model for all fwmatrix Pydantic models."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class FwMatrixBaseModel(BaseModel):
    """Base model class for fwmatrix Pydantic models.

    Serialization always goes through aliases so that dumped records use the
    same hyphenated keys as the YAML input (``routing-attributes``).
    """

    model_config = ConfigDict(
        extra="forbid",
        use_enum_values=True,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to a JSON-compatible dictionary."""
        return self.model_dump(by_alias=True, mode="json")
