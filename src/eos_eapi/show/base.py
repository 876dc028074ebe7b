"""Base classes for typed ``show`` command results.

EOS returns camelCase JSON keys; models use snake_case attributes and map
them through an alias generator, so ``model_validate`` reads device JSON and
``model_dump(by_alias=True)`` writes it back in the device's shape.

Defining a shape for another command::

    class ShowClock(ShowCommand):
        CMD: ClassVar[str] = "show clock"

        utc_time: float = 0
        local_time: dict = {}
"""
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError
from pydantic.alias_generators import to_camel

from ..errors import CommandError


class EosModel(BaseModel):
    """Model whose fields map to camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        protected_namespaces=(),
    )

    def to_json(self) -> dict[str, Any]:
        """The model as device JSON (camelCase keys)."""
        return self.model_dump(by_alias=True)


class ShowCommand(EosModel):
    """A ``show`` command whose JSON result is decoded into the model itself.

    Subclasses set ``CMD`` and declare fields with defaults; an empty instance
    is queued on a handle and filled in by ``decode`` when the batch returns.
    With text encoding the raw output is kept in ``output`` instead.
    """

    CMD: ClassVar[str] = ""

    _output: Optional[str] = PrivateAttr(default=None)

    def command(self) -> str:
        return self.CMD

    @property
    def output(self) -> Optional[str]:
        """Raw text output when the command ran with text encoding."""
        return self._output

    def decode(self, result: Any) -> None:
        """Populate the fields from one command result."""
        if isinstance(result, str):
            self._output = result
            return
        try:
            parsed = type(self).model_validate(result)
        except ValidationError as e:
            raise CommandError(
                0,
                f"Cannot decode result of {self.command()!r}",
                errors=[str(err["msg"]) for err in e.errors()],
            ) from e
        for name in type(self).model_fields:
            setattr(self, name, getattr(parsed, name))
