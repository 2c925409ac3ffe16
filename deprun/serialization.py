"""Wire format configuration shared by every encode/decode call."""

from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


def to_kebab(name: str) -> str:
    """Convert a snake_case field name to its kebab-case wire name."""
    return name.replace("_", "-")


@dataclass(frozen=True)
class WireFormat:
    """How models are written to and read from JSON.

    Field names always travel in kebab-case (see ``WireModel``) and enums as
    their string names. A single instance is built at startup and handed to
    whatever needs to encode or decode.
    """

    indent: int | None = 2
    by_alias: bool = True
    exclude_none: bool = False

    def dump(self, model: BaseModel) -> str:
        return model.model_dump_json(
            by_alias=self.by_alias,
            indent=self.indent,
            exclude_none=self.exclude_none,
        )

    def to_data(self, model: BaseModel) -> dict[str, Any]:
        return model.model_dump(
            mode="json",
            by_alias=self.by_alias,
            exclude_none=self.exclude_none,
        )

    def load(self, model_type: type[ModelT], text: str | bytes) -> ModelT:
        return model_type.model_validate_json(text)


DEFAULT_WIRE_FORMAT = WireFormat()
