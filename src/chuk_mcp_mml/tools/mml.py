"""
MML tools - MCP tools for compiling, validating and exporting notation.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_mml.compiler import ScoreIR
from chuk_mcp_mml.constants import ErrorKind, ErrorPolicy
from chuk_mcp_mml.export import export_mml, import_mml
from chuk_mcp_mml.mml import MMLCompiler, MMLError

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

    from chuk_mcp_mml.config import MMLConfig

logger = logging.getLogger(__name__)


def register_mml_tools(mcp: ChukMCPServer, config: MMLConfig) -> dict[str, Any]:
    """
    Register notation tools with the MCP server.

    Args:
        mcp: The MCP server instance
        config: Shared configuration (default error policy)

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def mml_compile(notations: list[str], error_policy: str | None = None) -> str:
        """
        Compile MML notation strings to timed events.

        Each string becomes one part. Events carry semitone indices,
        frequencies in Hz and start/duration/stop in seconds.

        Args:
            notations: One MML string per part (e.g. ["T120 O4 C4 D4 E4 F4"])
            error_policy: 'abort' or 'continue' (default from config)

        Returns:
            JSON string with the compiled score and any errors

        Example:
            mml_compile(notations=["T120 O4 CEG4 R4 C2", "T120 O3 C1"])
        """
        try:
            policy = ErrorPolicy(error_policy) if error_policy else config.error_policy
            errors: list[dict[str, str]] = []

            def on_error(kind: ErrorKind, token: str) -> None:
                errors.append({"kind": kind.value, "token": token})

            compiled = MMLCompiler(policy).compile_batch(notations, on_error)
            score = ScoreIR.from_compiled(notations, compiled)

            return json.dumps(
                {
                    "status": "success" if not errors else "error",
                    "policy": policy.value,
                    "score": score.to_dict(),
                    "errors": errors,
                }
            )
        except Exception as e:
            logger.exception("Failed to compile MML")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_compile"] = mml_compile

    @mcp.tool  # type: ignore[arg-type]
    async def mml_validate(notation: str) -> str:
        """
        Check a single MML string without keeping the result.

        Args:
            notation: MML notation string

        Returns:
            JSON string with validity, event count and duration, or the error

        Example:
            mml_validate(notation="T120 O4 C5")
        """
        try:
            events = MMLCompiler().compile(notation)
            return json.dumps(
                {
                    "status": "success",
                    "valid": True,
                    "events": len(events),
                    "duration": events[-1].stop if events else 0.0,
                }
            )
        except MMLError as e:
            return json.dumps(
                {
                    "status": "success",
                    "valid": False,
                    "error": {"kind": e.kind.value, "token": e.token, "message": str(e)},
                }
            )
        except Exception as e:
            logger.exception("Failed to validate MML")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_validate"] = mml_validate

    @mcp.tool  # type: ignore[arg-type]
    async def mml_export(notation: str) -> str:
        """
        Serialize an MML string to a portable Base64 payload.

        Args:
            notation: MML notation string

        Returns:
            JSON string with the payload

        Example:
            mml_export(notation="T120 O4 C4")
        """
        try:
            return json.dumps({"status": "success", "payload": export_mml(notation)})
        except Exception as e:
            logger.exception("Failed to export MML")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_export"] = mml_export

    @mcp.tool  # type: ignore[arg-type]
    async def mml_import(payload: str) -> str:
        """
        Decode a payload produced by mml_export.

        Args:
            payload: Base64 payload

        Returns:
            JSON string with the notation

        Example:
            mml_import(payload="VDEyMCBPNCBDNA==")
        """
        try:
            return json.dumps({"status": "success", "notation": import_mml(payload)})
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to import MML")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_import"] = mml_import

    return tools
