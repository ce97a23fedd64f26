"""
Shared helpers for the schema modules.

``CamelModel`` gives every schema camelCase aliases (``studentStatus``,
``presenterId``) while still accepting snake_case names when models
are built in Python code.  ``UtcDatetime`` normalises naive timestamps
to UTC so that comparisons against the current time never mix naive
and aware values.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Iterable

from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


def partial_updates(update: BaseModel, nullable: Iterable[str] = ()) -> Dict[str, Any]:
    """Return the fields explicitly supplied in a partial update.

    ``None`` is only kept for fields listed in ``nullable`` (where it
    clears the stored value); for required fields it is ignored.
    """
    allowed = set(nullable)
    return {
        key: value
        for key, value in update.model_dump(exclude_unset=True).items()
        if value is not None or key in allowed
    }
