"""Shared schema building blocks.

Learn: Request schemas only validate; they never touch the database.
Services receive already-validated values and build ORM rows from them.
"""

from typing import Any, ClassVar, TypeVar

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError, model_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class PatchBody(BaseModel):
    """Base for partial-update payloads.

    Every field is optional; only the ones the client actually sent end up
    in changes(). Sending null is only allowed for columns that may be
    empty (listed in nullable_fields).
    """

    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    model_config = {"extra": "ignore"}

    @model_validator(mode="after")
    def reject_null_for_required(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.nullable_fields:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """The explicitly provided fields, as plain Python values."""
        return self.model_dump(exclude_unset=True)


def parse_form(schema: type[SchemaT], data: dict[str, Any]) -> SchemaT:
    """Validate multipart form fields with a schema.

    Form fields that were not sent arrive as None and are left out, so a
    PatchBody built this way only reports what the client submitted.
    """
    try:
        return schema(**{k: v for k, v in data.items() if v is not None})
    except ValidationError as e:
        raise RequestValidationError(e.errors())
