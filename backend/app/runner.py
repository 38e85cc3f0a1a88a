# -*- coding: utf-8 -*-
"""Invoke the external quantitative model on a set of parameters."""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Dict, Mapping, Optional, Sequence, Union
from uuid import uuid4

from app.config import Settings
from app.models import IntervalResult, RangeParameter, ScalarParameter, ScalarResult
from app.parsers import ModelOutputError, ModelOutputParser, encode_inputs

logger = logging.getLogger(__name__)

_STDERR_TAIL_CHARS = 2000


class ModelError(RuntimeError):
    """Base class for failures while running the external model."""


class ModelUnavailableError(ModelError):
    """The model executable is missing or cannot be executed."""


class ModelExecutionError(ModelError):
    """The model exited with a non-zero status."""

    def __init__(self, returncode: int, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr
        message = f"model exited with status {returncode}"
        tail = stderr.strip()[-_STDERR_TAIL_CHARS:]
        if tail:
            message = f"{message}: {tail}"
        super().__init__(message)


class ModelTimeoutError(ModelError):
    """The model did not finish within the configured timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"model did not finish within {timeout:g}s")


class ModelDecodeError(ModelError):
    """The model's output could not be decoded."""

    def __init__(self, cause: ModelOutputError) -> None:
        self.line = cause.line
        self.line_number = cause.line_number
        super().__init__(f"unreadable model output: {cause}")


def _decode_stdout(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        line_number = raw.count(b"\n", 0, exc.start) + 1
        line = raw.split(b"\n")[line_number - 1].decode("utf-8", errors="replace")
        raise ModelOutputError("not valid UTF-8", line, line_number) from exc


@dataclass
class ModelRun:
    request_id: str
    input_text: str
    stdout: str
    results: Dict[str, Union[ScalarResult, IntervalResult]] = field(default_factory=dict)
    duration_seconds: float = 0.0


class ModelRunner:
    """Write inputs to a private temp file, run the model on it and decode stdout."""

    def __init__(
        self,
        command: Sequence[str],
        *,
        timeout: float,
        work_dir: Optional[Path] = None,
        archive_dir: Optional[Path] = None,
        archive_keep: int = 0,
        parser: Optional[ModelOutputParser] = None,
    ) -> None:
        if not command:
            raise ValueError("model command must not be empty")
        self.command = tuple(command)
        self.timeout = timeout
        self.work_dir = Path(work_dir) if work_dir is not None else None
        self.archive_dir = Path(archive_dir) if archive_dir is not None else None
        self.archive_keep = archive_keep
        self.parser = parser or ModelOutputParser()
        if self.work_dir is not None:
            self.work_dir.mkdir(parents=True, exist_ok=True)
        if self.archive_dir is not None:
            self.archive_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ModelRunner":
        return cls(
            settings.model_command,
            timeout=settings.model_timeout,
            work_dir=settings.work_dir,
            archive_dir=settings.archive_dir,
            archive_keep=settings.archive_keep,
        )

    def archive_path(self, request_id: str) -> Optional[Path]:
        if self.archive_dir is None:
            return None
        return self.archive_dir / f"{request_id}.txt"

    def _archive_input(self, input_path: Path, request_id: str) -> None:
        target = self.archive_path(request_id)
        if target is None:
            return
        tmp_path = target.with_name(f"{target.name}.{uuid4().hex}.tmp")
        try:
            shutil.copyfile(input_path, tmp_path)
            tmp_path.replace(target)
        except OSError:
            logger.exception("Could not archive model input for request %s", request_id)
            try:
                tmp_path.unlink()
            except OSError:
                logger.debug("Could not remove temporary archive file: %s", tmp_path)
            return
        self._prune_archive()

    def _prune_archive(self) -> None:
        if self.archive_dir is None or self.archive_keep <= 0:
            return
        entries = []
        for path in self.archive_dir.glob("*.txt"):
            try:
                entries.append((path.stat().st_mtime_ns, path))
            except FileNotFoundError:
                continue
        entries.sort()
        for _, stale in entries[: -self.archive_keep]:
            try:
                stale.unlink()
            except FileNotFoundError:
                continue
            except OSError:
                logger.debug("Could not remove archived input: %s", stale)

    def _invoke(self, input_path: Path) -> bytes:
        cmd = [*self.command, str(input_path)]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.error("Model timed out after %ss: %s", self.timeout, self.command[0])
            raise ModelTimeoutError(self.timeout) from exc
        except OSError as exc:
            logger.error("Model executable is not available: %s (%s)", self.command[0], exc)
            raise ModelUnavailableError(f"model executable not available: {self.command[0]}") from exc

        stderr = result.stderr.decode("utf-8", errors="replace")
        if result.returncode != 0:
            logger.warning(
                "Model failed with exit %d: %s", result.returncode, stderr.strip()[-_STDERR_TAIL_CHARS:]
            )
            raise ModelExecutionError(result.returncode, stderr)
        if stderr.strip():
            logger.info("Model stderr: %s", stderr.strip()[-_STDERR_TAIL_CHARS:])
        return result.stdout

    def run(
        self,
        inputs: Mapping[str, Union[ScalarParameter, RangeParameter]],
        request_id: Optional[str] = None,
    ) -> ModelRun:
        """Run the model synchronously and return the decoded results.

        The input file is archived under ``request_id`` once the process has
        been attempted, whether or not the run succeeds.
        """

        request_id = request_id or uuid4().hex
        input_text = encode_inputs(inputs)
        start = time.perf_counter()

        with TemporaryDirectory(prefix="model-run-", dir=self.work_dir) as tmp_dir:
            input_path = Path(tmp_dir) / "input.txt"
            input_path.write_text(input_text, encoding="utf-8")
            try:
                raw_stdout = self._invoke(input_path)
            finally:
                self._archive_input(input_path, request_id)

        try:
            stdout = _decode_stdout(raw_stdout)
            results = self.parser.parse(stdout)
        except ModelOutputError as exc:
            logger.error("Request %s: %s", request_id, exc)
            raise ModelDecodeError(exc) from exc

        duration = time.perf_counter() - start
        logger.info(
            "Request %s: %d inputs -> %d results in %.2fs",
            request_id,
            len(inputs),
            len(results),
            duration,
        )
        return ModelRun(
            request_id=request_id,
            input_text=input_text,
            stdout=stdout,
            results=results,
            duration_seconds=duration,
        )
