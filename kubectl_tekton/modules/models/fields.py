"""
Field role declarations for Results API messages.

Every field of a message is declared through wire(), which records the
field's JSON (wire) name and its role. The role table is built once when
the class is defined, so the query projection rules are a static property
of each message shape rather than something discovered per call.
"""

import base64
import binascii
import json
from enum import Enum
from typing import Any, ClassVar, Dict, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from ...errors import DecodingError

ROLE_KEY = "wire_role"


class FieldRole(str, Enum):
    """How a field travels in a REST exchange."""

    IDENTITY = "identity"  # name/parent, consumed by the path builder
    QUERY = "query"  # rendered into the query string
    BINARY = "binary"  # raw bytes, never placed in a URL
    INTERNAL = "internal"  # client-side bookkeeping, not on the wire


class WireField(NamedTuple):
    """One entry of a message's role table."""

    attribute: str
    wire_name: Optional[str]
    role: FieldRole


def wire(
    name: Optional[str] = None,
    role: FieldRole = FieldRole.QUERY,
    default: Any = PydanticUndefined,
    default_factory: Any = None,
    **kwargs: Any,
) -> Any:
    """
    Declare a message field.

    Args:
        name: JSON name on the wire; None marks the field INTERNAL
        role: Field role, ignored for unnamed fields
        default: Default value
        default_factory: Default factory, exclusive with default

    Returns:
        A pydantic FieldInfo carrying the wire name and role
    """
    if name is None:
        role = FieldRole.INTERNAL
        kwargs["exclude"] = True
    else:
        kwargs["alias"] = name
    kwargs["json_schema_extra"] = {ROLE_KEY: role.value}
    if default_factory is not None:
        return Field(default_factory=default_factory, **kwargs)
    return Field(default, **kwargs)


class Message(BaseModel):
    """
    Base class for typed Results API messages.

    Subclasses must declare every field with wire(); a field without a
    declared role is rejected when the class is defined.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    __wire_table__: ClassVar[Tuple[WireField, ...]] = ()

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        table: List[WireField] = []
        for attribute, info in cls.model_fields.items():
            table.append(_wire_field(cls.__name__, attribute, info))
        cls.__wire_table__ = tuple(table)

    @classmethod
    def role_table(cls) -> Dict[str, FieldRole]:
        """Map every wire-visible field name to its role."""
        return {f.wire_name: f.role for f in cls.__wire_table__ if f.wire_name is not None}

    def wire_fields(self) -> List[Tuple[Optional[str], Any, FieldRole]]:
        """Return (wire_name, value, role) for every declared field."""
        return [(f.wire_name, getattr(self, f.attribute), f.role) for f in self.__wire_table__]

    def to_json(self) -> bytes:
        """Encode using wire names, omitting unset message fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")

    def to_wire_dict(self) -> Dict[str, Any]:
        """Encode to a JSON-compatible mapping using wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, data: bytes) -> "Message":
        """
        Decode a JSON document into this message type.

        Unknown fields are ignored. An empty body decodes to the default
        message.

        Raises:
            DecodingError: If the document does not fit the message shape
        """
        if not data or not data.strip():
            return cls()
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise DecodingError(f"cannot decode {cls.__name__}: {e}") from e


def _wire_field(owner: str, attribute: str, info: FieldInfo) -> WireField:
    extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
    role = extra.get(ROLE_KEY)
    if role is None:
        raise TypeError(f"{owner}.{attribute} must be declared with wire()")
    return WireField(attribute, info.alias, FieldRole(role))


def decode_base64(value: Any) -> Any:
    """Accept standard or URL-safe base64 text for bytes fields."""
    if not isinstance(value, str):
        return value
    text = value.replace("-", "+").replace("_", "/")
    text += "=" * (-len(text) % 4)
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 payload: {e}") from e


def encode_base64(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


def render_json(value: Any) -> str:
    """Compact JSON rendering used for nested messages and maps."""
    if isinstance(value, Message):
        value = value.to_wire_dict()
    return json.dumps(value, separators=(",", ":"), sort_keys=True)
