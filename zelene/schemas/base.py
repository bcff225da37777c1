from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

QueryStatus = Literal["NEW", "IN_PROGRESS", "RESOLVED", "CANCELLED"]
UserRole = Literal["MEMBER", "ADMIN", "TENANT_ADMIN"]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; readable from ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )

    def dump(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
