"""
Shape validation of parsed payloads against expected schemas
"""

from typing import Any, get_args, get_origin

from pydantic import ValidationError

from ..exceptions import PayloadValidationError


def validate_against_schema(data: Any, schema: Any) -> Any:
    """Validate data against a Pydantic model, a generic, or a plain type

    Raises:
        PayloadValidationError: If the payload does not fit ``schema``.
    """
    try:
        return _validate(data, schema)
    except ValidationError as e:
        raise PayloadValidationError(
            f"Payload does not match {_schema_name(schema)}: {e}", payload=data
        ) from e


def _validate(data: Any, schema: Any) -> Any:
    if hasattr(schema, "model_validate"):  # Pydantic model
        return schema.model_validate(data)
    if get_origin(schema) is not None:  # Generic types like list[SomeModel]
        return validate_generic_type(data, schema)
    if isinstance(schema, type) and schema is not Any:
        if not isinstance(data, schema):
            raise PayloadValidationError(
                f"Expected {schema.__name__}, got {type(data).__name__}",
                payload=data,
            )
    return data


def validate_generic_type(data: Any, schema: Any) -> Any:
    """Handle list[Model], dict[str, Model] and other generic types"""
    origin = get_origin(schema)
    args = get_args(schema)

    if origin is list and args:
        if not isinstance(data, list):
            raise PayloadValidationError(
                f"Expected list, got {type(data).__name__}", payload=data
            )
        item_schema = args[0]
        return [_validate(item, item_schema) for item in data]

    if origin is dict and len(args) == 2:
        if not isinstance(data, dict):
            raise PayloadValidationError(
                f"Expected dict, got {type(data).__name__}", payload=data
            )
        _, value_schema = args
        return {k: _validate(v, value_schema) for k, v in data.items()}

    return data


def _schema_name(schema: Any) -> str:
    return getattr(schema, "__name__", None) or repr(schema)
