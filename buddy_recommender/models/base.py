from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ConfigDict, GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic_core import core_schema


class PyObjectId(ObjectId):
    """ObjectId usable as a Pydantic v2 field type."""

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type, handler: GetCoreSchemaHandler
    ):
        def validate(value):
            if isinstance(value, ObjectId):
                return value
            if ObjectId.is_valid(value):
                return ObjectId(value)
            raise ValueError("Invalid ObjectId")

        return core_schema.no_info_after_validator_function(
            validate,
            core_schema.union_schema(
                [core_schema.is_instance_schema(ObjectId), core_schema.str_schema()]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, core_schema_obj, handler: GetJsonSchemaHandler
    ):
        json_schema = handler(core_schema_obj)
        json_schema.update(type="string")
        return json_schema


MODEL_CONFIG = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


def to_object_id(value: Any) -> ObjectId:
    """Coerce a string or ObjectId to ObjectId, raising InvalidId when malformed."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        raise InvalidId(f"{value!r} is not a valid ObjectId")
    return ObjectId(value)
