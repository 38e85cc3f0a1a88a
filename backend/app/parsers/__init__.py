"""Codecs for the quantitative model's line-oriented text format."""

from .base import BaseParser
from .model_input import encode_inputs, encode_line
from .model_output import ModelOutputError, ModelOutputParser

__all__ = [
    "BaseParser",
    "ModelOutputError",
    "ModelOutputParser",
    "encode_inputs",
    "encode_line",
]
