"""Shared schema bits: camelCase wire models and the resolved caller."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys (the UI's shape); snake_case also accepted."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        allow_inf_nan=False,
    )


class Caller(BaseModel):
    """Identity resolved for the current request."""

    id: UUID
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = "EMPLOYEE"

    model_config = {"frozen": True}


class ProjectRef(CamelModel):
    id: UUID
    name: str
