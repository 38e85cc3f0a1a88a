"""Pydantic models for model inputs and decoded results."""

from __future__ import annotations

import re
from typing import Annotated, Dict, Literal, Union

from pydantic import BaseModel, Field, StrictInt, field_validator, model_validator

# JSON numbers only: no booleans and no numeric strings.
Number = Union[StrictInt, Annotated[float, Field(strict=True, allow_inf_nan=False)]]

_FORBIDDEN_NAME_CHARS = re.compile(r"[,\r\n]")


class ScalarParameter(BaseModel):
    """A parameter pinned to a single value."""

    type: Literal["scalar"]
    value: Number


class RangeParameter(BaseModel):
    """A parameter given as a low/high credence interval."""

    type: Literal["ci", "range"]
    low: Number
    high: Number

    @model_validator(mode="after")
    def _check_order(self) -> "RangeParameter":
        if self.low > self.high:
            raise ValueError(f"low ({self.low}) must not exceed high ({self.high})")
        return self


ParameterSpec = Annotated[Union[ScalarParameter, RangeParameter], Field(discriminator="type")]


class EvalRequest(BaseModel):
    """Body of ``POST /eval``."""

    inputs: Dict[str, ParameterSpec]

    @field_validator("inputs")
    @classmethod
    def _check_names(cls, inputs: Dict[str, ParameterSpec]) -> Dict[str, ParameterSpec]:
        if not inputs:
            raise ValueError("at least one input parameter is required")
        for name in inputs:
            if not name.strip():
                raise ValueError("parameter names must not be blank")
            if _FORBIDDEN_NAME_CHARS.search(name):
                raise ValueError(f"parameter name {name!r} must not contain commas or newlines")
        return inputs


class ScalarResult(BaseModel):
    type: Literal["scalar"] = "scalar"
    value: float


class IntervalResult(BaseModel):
    type: Literal["ci"] = "ci"
    low: float
    high: float


ResultRecord = Annotated[Union[ScalarResult, IntervalResult], Field(discriminator="type")]
