"""Parse the model's stdout into named result records."""

from __future__ import annotations

import logging
import math
from typing import Dict, Optional, Union

from app.models import IntervalResult, ScalarResult

from .base import BaseParser

logger = logging.getLogger(__name__)

Result = Union[ScalarResult, IntervalResult]


class ModelOutputError(ValueError):
    """Raised when a line of model output cannot be decoded."""

    def __init__(self, message: str, line: str, line_number: Optional[int] = None) -> None:
        self.reason = message
        self.line = line
        self.line_number = line_number
        location = f"line {line_number}" if line_number is not None else "line"
        super().__init__(f"{location} {line!r}: {message}")


def _to_float(raw_value: str, line: str) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ModelOutputError(f"{raw_value!r} is not a number", line) from exc
    if not math.isfinite(value):
        raise ModelOutputError(f"{raw_value!r} is not a finite number", line)
    return value


class ModelOutputParser(BaseParser):
    """Decode ``name,value`` and ``name,low,high`` lines.

    Two fields give a scalar, three give a confidence interval. Any other
    field count fails the whole parse. Blank lines are ignored and a later
    line with a repeated name replaces the earlier record.
    """

    def parse_line(self, line: str) -> tuple[str, Result]:
        pieces = [piece.strip() for piece in line.split(",")]
        if len(pieces) == 2:
            name, value = pieces
            return name, ScalarResult(value=_to_float(value, line))
        if len(pieces) == 3:
            name, low, high = pieces
            return name, IntervalResult(low=_to_float(low, line), high=_to_float(high, line))
        raise ModelOutputError(f"expected 2 or 3 fields, got {len(pieces)}", line)

    def parse(self, source: str) -> Dict[str, Result]:
        data: Dict[str, Result] = {}
        for line_number, line in self.iter_lines(source):
            try:
                name, record = self.parse_line(line)
            except ModelOutputError as exc:
                raise ModelOutputError(exc.reason, line, line_number) from exc
            if name in data:
                logger.debug("Duplicate result %r on line %d replaces earlier value", name, line_number)
            data[name] = record
        return data
