"""Base request schema and body parsing helper"""

from typing import Type, TypeVar

from flask import request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

SchemaT = TypeVar('SchemaT', bound='RequestSchema')


class RequestSchema(BaseModel):
    """Accepts camelCase or snake_case keys; enum fields resolve to plain strings"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        extra='ignore',
    )

    def changes(self, nullable=()) -> dict:
        """Fields the client actually sent; nulls are dropped unless the column is in ``nullable``"""
        return {
            key: value for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in nullable
        }


def parse_body(schema_cls: Type[SchemaT], data: dict = None) -> SchemaT:
    """
    Validate the JSON request body against ``schema_cls``.

    pydantic.ValidationError propagates to the app error handler, which
    answers 400 with per-field messages.
    """
    if data is None:
        data = request.get_json(silent=True) or {}
    return schema_cls.model_validate(data)
