"""Shared pydantic base for persisted documents."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose serialized field names are camelCase.

    Python code uses snake_case attributes; database rows and API payloads
    use the camelCase aliases. Either spelling is accepted on input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )

    def to_record(self, exclude_none: bool = True) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict keyed by persisted field names."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=exclude_none)
