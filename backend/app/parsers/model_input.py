"""Encode parameter specifications into the model's input file format."""

from __future__ import annotations

from typing import Mapping, Union

from app.models import RangeParameter, ScalarParameter


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, int):
        return str(value)
    return repr(float(value))


def encode_line(name: str, spec: Union[ScalarParameter, RangeParameter]) -> str:
    """Return the ``name,low,high`` line for a single parameter.

    Scalars collapse to ``name,value,value``.
    """

    if isinstance(spec, ScalarParameter):
        low = high = spec.value
    else:
        low, high = spec.low, spec.high
    return f"{name},{_format_number(low)},{_format_number(high)}"


def encode_inputs(inputs: Mapping[str, Union[ScalarParameter, RangeParameter]]) -> str:
    """Encode all parameters, one line each, joined without a trailing newline."""

    return "\n".join(encode_line(name, spec) for name, spec in inputs.items())

