# -*- coding: utf-8 -*-
"""Runtime configuration for the model server."""

from __future__ import annotations

import os
import shlex
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

_BACKEND_DIR = Path(__file__).resolve().parent.parent

DEFAULT_MODEL_COMMAND = "./quantitative_model/a.out"
DEFAULT_MODEL_TIMEOUT = 30.0
DEFAULT_PORT = 8000
DEFAULT_ARCHIVE_KEEP = 1000


def _parse_float(raw_value: str, name: str) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw_value!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw_value!r}")
    return value


def _parse_keep(raw_value: str) -> int:
    try:
        keep = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"INPUT_ARCHIVE_KEEP must be an integer, got {raw_value!r}") from exc
    if keep < 0:
        raise ValueError(f"INPUT_ARCHIVE_KEEP must not be negative, got {keep}")
    return keep


def _parse_port(raw_value: str) -> int:
    try:
        port = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"PORT must be an integer, got {raw_value!r}") from exc
    if not 0 < port < 65536:
        raise ValueError(f"PORT out of range: {port}")
    return port


@dataclass(frozen=True)
class Settings:
    """Immutable settings handed to :func:`app.main.create_app` at startup."""

    model_command: Tuple[str, ...] = (DEFAULT_MODEL_COMMAND,)
    model_timeout: float = DEFAULT_MODEL_TIMEOUT
    work_dir: Path = Path(tempfile.gettempdir())
    archive_dir: Optional[Path] = _BACKEND_DIR / "runs"
    archive_keep: int = DEFAULT_ARCHIVE_KEEP
    index_path: Path = _BACKEND_DIR / "public" / "index.html"
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment (and a ``.env`` file)."""

        load_dotenv()

        command = shlex.split(os.getenv("MODEL_COMMAND", DEFAULT_MODEL_COMMAND))
        if not command:
            raise ValueError("MODEL_COMMAND must not be empty")

        archive_env = os.getenv("INPUT_ARCHIVE_DIR")
        if archive_env is None:
            archive_dir: Optional[Path] = _BACKEND_DIR / "runs"
        elif archive_env.strip():
            archive_dir = Path(archive_env)
        else:
            archive_dir = None

        return cls(
            model_command=tuple(command),
            model_timeout=_parse_float(
                os.getenv("MODEL_TIMEOUT", str(DEFAULT_MODEL_TIMEOUT)), "MODEL_TIMEOUT"
            ),
            work_dir=Path(os.getenv("MODEL_WORK_DIR") or tempfile.gettempdir()),
            archive_dir=archive_dir,
            archive_keep=_parse_keep(os.getenv("INPUT_ARCHIVE_KEEP", str(DEFAULT_ARCHIVE_KEEP))),
            index_path=Path(os.getenv("INDEX_PATH") or _BACKEND_DIR / "public" / "index.html"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_parse_port(os.getenv("PORT", str(DEFAULT_PORT))),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
