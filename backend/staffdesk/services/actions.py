"""
Action handler contract shared by every employee-facing operation.

    authenticate -> authorize by ownership -> validate -> mutate
                 -> recompute derived aggregate -> invalidate cache -> envelope

Handlers are plain functions `(db, caller, *args)` decorated with
`server_action`. They raise `ActionError` subclasses for expected refusals and
let anything else propagate; the decorator turns both into the uniform
`ActionResponse` envelope so nothing escapes to the caller as an exception.
"""

import functools
import logging
import uuid
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from staffdesk.schemas.common import Caller
from staffdesk.services.revalidation import revalidate_path

logger = logging.getLogger(__name__)

_UNSET: Any = object()


# ---------- envelope ----------

class ActionResponse(BaseModel):
    success: bool
    data: Any = None
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = _UNSET, message: str | None = None) -> "ActionResponse":
        fields: dict[str, Any] = {"success": True}
        if data is not _UNSET:
            fields["data"] = data
        if message is not None:
            fields["message"] = message
        return cls(**fields)

    @classmethod
    def fail(cls, error: str) -> "ActionResponse":
        return cls(success=False, error=error)

    def to_json(self) -> dict:
        """Wire form: camelCase payload keys, absent optional fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


# ---------- error taxonomy ----------

class ActionError(Exception):
    """Expected refusal; `message` is safe to show to the caller."""

    kind = "Internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(ActionError):
    kind = "Unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFound(ActionError):
    """Record absent or owned by someone else. The two are never told apart."""

    kind = "NotFound"

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found or access denied")


class ValidationFailed(ActionError):
    kind = "ValidationError"


class InvalidState(ActionError):
    kind = "InvalidState"


# ---------- payload validation ----------

def _field_label(schema: type[BaseModel], key: str) -> str:
    for name, field in schema.model_fields.items():
        if key in (name, field.alias):
            if field.title:
                return field.title
            return name.replace("_", " ").capitalize()
    return key


def _describe(schema: type[BaseModel], err: dict) -> str:
    key = str(err["loc"][0]) if err.get("loc") else ""
    if err["type"] == "value_error" and "error" in err.get("ctx", {}):
        return str(err["ctx"]["error"])
    if err["type"] == "missing":
        return f"{_field_label(schema, key)} is required"
    if key:
        return f"{_field_label(schema, key)}: {err['msg']}"
    return err["msg"]


def validate_payload(schema: type[BaseModel], payload: Any) -> BaseModel:
    """Validate a raw payload (dict or model) against `schema`, raising ValidationFailed."""
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(payload or {})
    except ValidationError as e:
        raise ValidationFailed(_describe(schema, e.errors()[0]))


def parse_id(value: Any, entity: str) -> uuid.UUID:
    """Ids arrive as strings from the UI; a malformed id simply matches nothing."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        raise NotFound(entity)


# ---------- ownership scoping ----------

def find_owned(db: Session, model, record_id: Any, owner_column, caller: Caller, entity: str):
    """Fetch `model` by id only if `owner_column` equals the caller, else NotFound."""
    rid = parse_id(record_id, entity)
    row = db.query(model).filter(model.id == rid, owner_column == caller.id).first()
    if row is None:
        raise NotFound(entity)
    return row


# ---------- boundary ----------

def server_action(
    failure_message: str,
    *,
    schema: type[BaseModel] | None = None,
    revalidate: Iterable[str] = (),
):
    """Wrap a handler in the action contract.

    - no caller -> "Unauthorized", handler never runs
    - `schema` given -> the last positional argument is validated centrally
    - ActionError -> its message; any other exception -> `failure_message`
    - success -> every path in `revalidate` is signalled stale
    """
    paths = tuple(revalidate)

    def decorator(func):
        @functools.wraps(func)
        def wrapper(db: Session, caller: Optional[Caller], *args, **kwargs) -> ActionResponse:
            if caller is None:
                return ActionResponse.fail(Unauthorized().message)

            try:
                if schema is not None:
                    if "payload" in kwargs:
                        kwargs["payload"] = validate_payload(schema, kwargs["payload"])
                    else:
                        args = (*args[:-1], validate_payload(schema, args[-1] if args else None))
                result = func(db, caller, *args, **kwargs)
            except ActionError as e:
                db.rollback()
                logger.info("%s refused for user %s: [%s] %s", func.__name__, caller.id, e.kind, e.message)
                return ActionResponse.fail(e.message)
            except Exception:
                db.rollback()
                logger.exception("%s failed for user %s", func.__name__, caller.id)
                return ActionResponse.fail(failure_message)

            for path in paths:
                try:
                    revalidate_path(path)
                except Exception:
                    logger.exception("Could not mark %s stale", path)

            if isinstance(result, ActionResponse):
                return result
            return ActionResponse.ok(result)

        wrapper.revalidates = paths
        return wrapper

    return decorator
