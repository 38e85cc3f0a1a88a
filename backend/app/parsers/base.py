"""Base classes and interfaces for line-oriented model output parsers."""

from abc import ABC, abstractmethod
from typing import Any, Iterator


class BaseParser(ABC):
    """Parse model output one line at a time into records keyed by name."""

    @staticmethod
    def iter_lines(source: str) -> Iterator[tuple[int, str]]:
        """Yield ``(line_number, line)`` for every non-blank line.

        Only ``\\n`` separates lines; a trailing ``\\r`` is dropped.
        """
        for line_number, line in enumerate(source.split("\n"), start=1):
            line = line.removesuffix("\r")
            if line.strip():
                yield line_number, line

    @abstractmethod
    def parse_line(self, line: str) -> tuple[str, Any]:
        """Decode a single line into ``(name, record)``."""
        raise NotImplementedError

    @abstractmethod
    def parse(self, source: str) -> dict[str, Any]:
        """Parse the provided source and return records keyed by name."""
        raise NotImplementedError
