"""Tool argument schemas and validation."""

from typing import Any, Dict, Mapping, Optional, Tuple
from dataclasses import dataclass

from ..core.errors import ValidationError

# JSON-Schema primitive name -> accepted Python types
PRIMITIVE_TYPES = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
}


@dataclass(frozen=True)
class FieldSpec:
    """A single named tool argument."""
    name: str
    type: str = "string"
    required: bool = False
    description: str = ""

    def __post_init__(self):
        if self.type not in PRIMITIVE_TYPES:
            raise ValueError(f"Unsupported field type for '{self.name}': {self.type}")

    def matches(self, value: Any) -> bool:
        # bool is an int subclass but never a number here
        if isinstance(value, bool) and self.type != "boolean":
            return False
        return isinstance(value, PRIMITIVE_TYPES[self.type])


@dataclass(frozen=True)
class ParameterSchema:
    """Ordered set of tool argument fields."""
    fields: Tuple[FieldSpec, ...] = ()

    def __post_init__(self):
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field names in schema: {names}")

    @property
    def required(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)

    def to_json_schema(self) -> Dict[str, Any]:
        """Render as the JSON-Schema object advertised in ``tools/list``."""
        properties = {}
        for f in self.fields:
            prop = {"type": f.type}
            if f.description:
                prop["description"] = f.description
            properties[f.name] = prop

        schema = {"type": "object", "properties": properties}
        if self.required:
            schema["required"] = list(self.required)
        return schema


class ArgumentValidator:
    """Turns an untyped argument mapping into validated tool arguments."""

    @staticmethod
    def validate(schema: ParameterSchema, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Validate arguments against a schema.

        Unknown fields are ignored and left out of the result. Optional
        fields given as ``None`` count as absent.

        Returns:
            Dictionary holding only the declared fields that were supplied

        Raises:
            ValidationError: On the first missing, blank or mistyped field
        """
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise ValidationError("arguments", "must be an object", arguments)

        validated = {}
        for f in schema.fields:
            value = arguments.get(f.name)

            if value is None:
                if f.required:
                    raise ValidationError(f.name, "is required")
                continue

            if not f.matches(value):
                raise ValidationError(f.name, f"must be of type {f.type}", value)

            if f.required and f.type == "string" and not value.strip():
                raise ValidationError(f.name, "must not be blank", value)

            validated[f.name] = value

        return validated
