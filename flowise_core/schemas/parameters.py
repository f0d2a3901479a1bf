"""Tunable parameter descriptors shared by models and node categories."""

from __future__ import annotations

import enum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.json_schema import SkipJsonSchema


class ParamType(str, enum.Enum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    SELECT = "select"


class ParameterSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    type: ParamType
    description: str = ""
    required: bool = False
    default_value: Any = None
    options: tuple[str, ...] | None = None
    min: float | None = None
    max: float | None = None
    step: float | None = None
    validator: SkipJsonSchema[Callable[[Any], bool] | None] = Field(None, exclude=True)


class ModificationField(BaseModel):
    """An editable node field together with the node's current value."""

    name: str
    label: str
    type: ParamType
    description: str = ""
    options: list[str] | None = None
    min: float | None = None
    max: float | None = None
    step: float | None = None
    current_value: Any = None

    @classmethod
    def from_spec(cls, spec: ParameterSpec, current_value: Any = None) -> ModificationField:
        return cls(
            name=spec.name,
            label=spec.label,
            type=spec.type,
            description=spec.description,
            options=list(spec.options) if spec.options is not None else None,
            min=spec.min,
            max=spec.max,
            step=spec.step,
            current_value=current_value,
        )
