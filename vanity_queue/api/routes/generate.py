"""
Synchronous generation route.

Runs the per-keypair loop inline without touching the queue or the job
store. Intended for short suffixes only.
"""

import logging
import time

from fastapi import APIRouter

from vanity_queue.api.dependencies import AppSettings, GeneratorDep
from vanity_queue.api.validation import clamp_count, clamp_timeout, validate_suffix
from vanity_queue.types.api import ErrorResponse, GenerateResponse, KeypairRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Generate"])


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Generate keypairs synchronously",
    description="Generate keypairs and return them in the response.",
)
async def generate(
    request: KeypairRequest,
    settings: AppSettings,
    generator: GeneratorDep,
) -> GenerateResponse:
    suffix = validate_suffix(request.suffix, settings.max_suffix_length)
    count = clamp_count(request.count)
    timeout_ms = clamp_timeout(request.timeout, settings.timeout_ms, settings.max_timeout_ms)

    logger.info(
        "Generating keypairs",
        extra={"suffix": suffix, "count": count, "timeout_ms": timeout_ms},
    )

    start = time.monotonic()
    keypairs = await generator.generate_many(suffix, count, timeout_ms)

    return GenerateResponse(
        count=len(keypairs),
        suffix=suffix,
        total_time_ms=round((time.monotonic() - start) * 1000, 3),
        keypairs=keypairs,
    )
