# File: pothosgen/rpc.py
"""
pothosgen - Prisma Generator Protocol
=====================================
Line-delimited JSON-RPC 2.0 responder that lets ``prisma generate`` drive
the generator as a child process.

Supported methods:
    - ``getManifest`` → generator manifest
    - ``generate``    → import ``params.dmmf`` and write the output tree to
                        ``params.generator.output.value``

Blank lines and unknown methods are ignored.  Every response carries the
request ``id`` and is flushed immediately.  Nothing but responses is written
to *stdout*; diagnostics go through logging (stderr).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from pothosgen.generator import GenerationReport, PothosGenerator

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.rpc")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MANIFEST: Dict[str, Any] = {
    "prettyName": "Prisma Pothos Generator",
    "defaultOutput": "../src/generated",
    "requiresGenerators": ["prisma-client-js"],
}

DEFAULT_OUTPUT: str = "./src/generated"


class GenerationFailedError(RuntimeError):
    """Raised when a ``generate`` request could not be completed."""

    def __init__(self, report: GenerationReport) -> None:
        self.report: GenerationReport = report
        problems: List[str] = (
            report.input_errors
            + report.validation_errors
            + report.generation_errors
            + report.export_errors
        )
        super().__init__(
            "Generation failed: " + ("; ".join(problems) or "unknown error")
        )


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------


def _output_path(params: Dict[str, Any]) -> str:
    """``params.generator.output.value`` or the default output directory."""
    generator_info = params.get("generator")
    if isinstance(generator_info, dict):
        output = generator_info.get("output")
        if isinstance(output, dict) and isinstance(output.get("value"), str):
            return output["value"]
    return DEFAULT_OUTPUT


def _write_response(stdout: TextIO, request_id: Any, result: Any) -> None:
    response: Dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "result": result}
    stdout.write(json.dumps(response) + "\n")
    stdout.flush()


def handle_request(
    request: Dict[str, Any],
    generator: PothosGenerator,
) -> Optional[Dict[str, Any]]:
    """
    Handle one decoded request.

    Returns ``{"result": ...}`` for the methods this generator answers, or
    ``None`` for methods it ignores.

    Raises:
        GenerationFailedError: If a ``generate`` request fails.
    """
    method = request.get("method")

    if method == "getManifest":
        return {"result": {"manifest": MANIFEST}}

    if method == "generate":
        params = request.get("params")
        if isinstance(params, dict) and "dmmf" in params:
            output_dir: str = _output_path(params)
            logger.info("Generating from DMMF into %s", output_dir)
            report: GenerationReport = generator.generate_from_document(
                params["dmmf"], Path(output_dir)
            )
            if not report.success:
                raise GenerationFailedError(report)
            logger.info(report.summary())
        else:
            logger.warning("generate request without params.dmmf; nothing to do.")
        return {"result": None}

    logger.debug("Ignoring unknown method: %r", method)
    return None


# ---------------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------------


def run_rpc_loop(
    stdin: TextIO,
    stdout: TextIO,
    generator: Optional[PothosGenerator] = None,
) -> int:
    """
    Serve requests from *stdin* until end of input.

    Returns the number of requests answered.

    Raises:
        ValueError: If a line is not a JSON object.
        GenerationFailedError: If a ``generate`` request fails.
    """
    gen: PothosGenerator = generator or PothosGenerator()
    answered: int = 0

    for raw_line in stdin:
        line: str = raw_line.strip()
        if not line:
            continue

        try:
            request = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Undecodable JSON-RPC request: {exc}") from exc
        if not isinstance(request, dict):
            raise ValueError(
                f"JSON-RPC request must be an object, got {type(request).__name__}."
            )

        try:
            outcome = handle_request(request, gen)
        except GenerationFailedError as exc:
            logger.error("%s", exc)
            raise

        if outcome is None:
            continue
        _write_response(stdout, request.get("id"), outcome["result"])
        answered += 1

    logger.debug("JSON-RPC input closed after %d response(s).", answered)
    return answered


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "MANIFEST",
    "DEFAULT_OUTPUT",
    "GenerationFailedError",
    "handle_request",
    "run_rpc_loop",
]

logger.debug("pothosgen.rpc loaded — %d public symbols.", len(__all__))
