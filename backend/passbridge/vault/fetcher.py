"""Runs the password-manager CLI and classifies its outcome."""

import asyncio
import os
import signal
import time

from ..logging import get_logger
from .models import Failure, RetrievalRequest, RetrievalResult, Secret

logger = get_logger("vault.fetcher")

TIMEOUT_REASON = "timeout"
MAX_REASON_LENGTH = 200


def summarize_diagnostic(stderr: bytes, returncode: int) -> str:
    """Turn the CLI's error stream into a short, displayable reason."""
    text = stderr.decode("utf-8", errors="replace").strip()
    if not text:
        return f"exit code {returncode}"
    if len(text) > MAX_REASON_LENGTH:
        text = text[: MAX_REASON_LENGTH - 1].rstrip() + "…"
    return text


async def run_cli(
    argv: list[str],
    timeout_ms: int,
    env: dict[str, str] | None = None,
) -> RetrievalResult:
    """Spawn `argv`, wait at most `timeout_ms`, and classify the result.

    Never raises for process outcomes: timeouts, non-zero exits and spawn
    errors all come back as Failure.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
            # Own process group, so a timeout also reaches anything the CLI spawned
            start_new_session=True,
        )
    except (OSError, ValueError, TypeError) as e:
        # Missing or non-executable binary, a path that is not a string,
        # or an argument the OS refuses
        return Failure(str(e))

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_ms / 1000)
    except asyncio.TimeoutError:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            pass
        await proc.wait()
        return Failure(TIMEOUT_REASON)

    if proc.returncode != 0:
        return Failure(summarize_diagnostic(stderr, proc.returncode))

    return Secret(stdout.decode("utf-8", errors="replace"))


class CredentialFetcher:
    """Fetches one property of one vault entry per call."""

    async def fetch(self, request: RetrievalRequest) -> RetrievalResult:
        started = time.monotonic()
        result = await run_cli(request.argv(), request.timeout_ms)
        elapsed_ms = (time.monotonic() - started) * 1000

        if isinstance(result, Secret):
            logger.info(
                f"Fetched {request.property.value} for {request.source} in {elapsed_ms:.0f}ms"
            )
        else:
            logger.warning(
                f"Fetch of {request.property.value} for {request.source} failed "
                f"after {elapsed_ms:.0f}ms: {result.reason}"
            )
        return result
