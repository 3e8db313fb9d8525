from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from jewel_ledger.utils.numbers import parse_finite

# Persisted numbers may be missing or malformed in older records. They parse
# to None here and are coerced where they are used.
Number = Annotated[Optional[float], BeforeValidator(parse_finite)]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _none_to_empty(value: Any) -> Any:
    return {} if value is None else value


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


OptionalDatetime = Annotated[Optional[datetime], BeforeValidator(_blank_to_none)]

# Nested objects and lists the API may send as null
EmptyIfNone = BeforeValidator(_none_to_empty)
ListIfNone = BeforeValidator(_none_to_list)


class ApiModel(BaseModel):
    """Base for records read from the shop API (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ApiRecord(ApiModel):
    id: str = Field(default="", alias="_id")
    created_at: OptionalDatetime = None
    updated_at: OptionalDatetime = None
