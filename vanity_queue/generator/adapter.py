"""
Adapter around the external solana-vanity binary.

One call spawns one process and yields one verified keypair. The adapter
never retries; the caller decides what a failure means for its job.
"""

import asyncio
import logging
import re
import time
from collections.abc import Awaitable, Callable, Sequence

from vanity_queue.constants import (
    ADDRESS_PATTERN,
    PRIVATE_KEY_PATTERN,
    SPAN_GENERATE_KEYPAIR,
    TIME_ELAPSED_PATTERN,
)
from vanity_queue.errors import GenerationTimeout, GeneratorError, ParseFailure, ToolFailure
from vanity_queue.generator.keys import decode_secret, encode_secret, expand_secret, verify_keypair
from vanity_queue.observability.metrics import MetricsCollector, get_metrics
from vanity_queue.observability.tracing import get_tracer
from vanity_queue.types.job import KeypairResult

logger = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(ADDRESS_PATTERN)
_PRIVATE_KEY_RE = re.compile(PRIVATE_KEY_PATTERN)
_TIME_RE = re.compile(TIME_ELAPSED_PATTERN)

# Called after each successful keypair in generate_many
ResultCallback = Callable[[KeypairResult], Awaitable[None]]


def parse_output(output: str) -> tuple[str, str, float | None]:
    """
    Extract address, base58 private key and tool time from tool output.

    Raises:
        ParseFailure: If the address or private key is missing.
    """
    address_match = _ADDRESS_RE.search(output)
    key_match = _PRIVATE_KEY_RE.search(output)
    if not address_match or not key_match:
        raise ParseFailure("Could not parse output")

    time_match = _TIME_RE.search(output)
    tool_time = None
    if time_match:
        try:
            tool_time = float(time_match.group(1))
        except ValueError:
            tool_time = None

    return address_match.group(1), key_match.group(1), tool_time


def build_result(output: str, started: float) -> KeypairResult:
    """Parse tool output and verify the keypair it describes."""
    address, private_key, tool_time = parse_output(output)
    secret_key = expand_secret(decode_secret(private_key))
    public_key = verify_keypair(address, secret_key)

    return KeypairResult(
        public_key=public_key,
        secret_key=encode_secret(secret_key),
        generation_time_ms=round((time.monotonic() - started) * 1000, 3),
        tool_time_seconds=tool_time,
    )


class GeneratorAdapter:
    """
    Runs the external generator and validates what it returns.

    Args:
        command: argv prefix for the tool; `--suffix <suffix>` is appended.
        metrics: Optional metrics collector.
    """

    def __init__(
        self,
        command: Sequence[str],
        metrics: MetricsCollector | None = None,
    ):
        if not command:
            raise ValueError("Generator command must not be empty")
        self.command = list(command)
        self._metrics = metrics or get_metrics()

    async def generate_one(self, suffix: str, timeout_ms: int) -> KeypairResult:
        """
        Generate a single keypair whose address ends with `suffix`.

        Raises:
            GenerationTimeout: The tool ran longer than `timeout_ms`.
            ToolFailure: The tool could not start or exited non-zero.
            ParseFailure: The output lacked an address or key.
            IntegrityFailure: The reported keypair is inconsistent.
        """
        started = time.monotonic()

        with get_tracer().start_as_current_span(SPAN_GENERATE_KEYPAIR) as span:
            span.set_attribute("suffix", suffix)
            span.set_attribute("timeout_ms", timeout_ms)
            try:
                output = await self._run_tool(suffix, timeout_ms)
                result = build_result(output, started)
            except GeneratorError as e:
                span.set_attribute("error", str(e))
                self._metrics.record_keypair_generated(
                    type(e).__name__, time.monotonic() - started
                )
                raise

        self._metrics.record_keypair_generated("success", time.monotonic() - started)
        logger.debug(
            "Keypair generated",
            extra={"suffix": suffix, "public_key": result.public_key},
        )
        return result

    async def generate_many(
        self,
        suffix: str,
        count: int,
        timeout_ms: int,
        on_result: ResultCallback | None = None,
    ) -> list[KeypairResult]:
        """
        Generate `count` keypairs one after another.

        Each search saturates the CPU on its own, so items are never run in
        parallel. The first failure propagates; `on_result` has already been
        awaited for every keypair produced before it.
        """
        results: list[KeypairResult] = []
        for _ in range(count):
            result = await self.generate_one(suffix, timeout_ms)
            results.append(result)
            if on_result is not None:
                await on_result(result)
        return results

    async def _run_tool(self, suffix: str, timeout_ms: int) -> str:
        """Spawn the tool and return its combined stdout and stderr."""
        argv = [*self.command, "--suffix", suffix]
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ToolFailure(f"Failed to spawn {self.command[0]}: {e}") from e

        try:
            stdout_b, stderr_b = await asyncio.wait_for(
                process.communicate(), timeout=timeout_ms / 1000
            )
        except TimeoutError:
            await _kill(process)
            logger.warning(
                "Generator timed out",
                extra={"suffix": suffix, "timeout_ms": timeout_ms, "pid": process.pid},
            )
            raise GenerationTimeout(timeout_ms) from None
        except asyncio.CancelledError:
            await _kill(process)
            raise

        # asyncio subprocesses work in bytes
        output = stdout_b.decode("utf-8", errors="replace") + stderr_b.decode(
            "utf-8", errors="replace"
        )

        if process.returncode != 0:
            raise ToolFailure(f"{self.command[0]} failed: {output}")

        return output


async def _kill(process: asyncio.subprocess.Process) -> None:
    """Forcibly stop a child process and reap it."""
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()
