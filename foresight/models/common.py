"""
Common model base used across foresight.
"""

from typing import Any

from pydantic import BaseModel as PydanticBase, ConfigDict
from pydantic.alias_generators import to_camel


class BaseModel(PydanticBase):
    """Base model for all models"""

    model_config = ConfigDict(use_enum_values=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert the model to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")


class CamelModel(BaseModel):
    """Model serialized with camelCase keys for public JSON output"""

    model_config = ConfigDict(use_enum_values=True, alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
