# -*- coding: utf-8 -*-
"""Model evaluation endpoint."""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional
from uuid import uuid4

from fastapi import APIRouter, Header, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool

from app.models import EvalRequest, ResultRecord
from app.runner import (
    ModelDecodeError,
    ModelExecutionError,
    ModelRunner,
    ModelTimeoutError,
    ModelUnavailableError,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["evaluation"])

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def _get_runner(request: Request) -> ModelRunner:
    return request.app.state.runner


@router.post("/eval", response_model=Dict[str, ResultRecord])
async def evaluate(
    payload: EvalRequest,
    request: Request,
    response: Response,
    x_request_id: Optional[str] = Header(default=None),
):
    runner = _get_runner(request)
    if x_request_id and _REQUEST_ID_PATTERN.match(x_request_id):
        request_id = x_request_id
    else:
        if x_request_id:
            logger.warning("Ignoring malformed X-Request-ID header: %r", x_request_id)
        request_id = uuid4().hex
    headers = {"X-Request-ID": request_id}

    try:
        run = await run_in_threadpool(runner.run, payload.inputs, request_id)
    except ModelUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc), headers=headers) from exc
    except ModelTimeoutError as exc:
        raise HTTPException(status_code=504, detail=str(exc), headers=headers) from exc
    except ModelExecutionError as exc:
        raise HTTPException(status_code=502, detail=str(exc), headers=headers) from exc
    except ModelDecodeError as exc:
        raise HTTPException(status_code=502, detail=str(exc), headers=headers) from exc

    response.headers["X-Request-ID"] = request_id
    return run.results
