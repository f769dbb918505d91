"""Tool discovery by running a user-configured command.

The command prints a JSON array on stdout. Each item is either a bare
function declaration (``{"name": ..., "description": ..., "parameters":
...}``) or a wrapper holding a ``function_declarations`` /
``functionDeclarations`` list. Parameters are sanitized before the
declarations are returned.
"""

from __future__ import annotations

import asyncio
import json
import logging
import shlex
from typing import Any, Protocol, runtime_checkable

from contentgen.core.interface.models import ToolDeclaration
from contentgen.core.tools.schema import sanitize_parameters
from contentgen.errors import ToolDiscoveryError

logger = logging.getLogger(__name__)

MAX_OUTPUT_BYTES = 10 * 1024 * 1024
_READ_SIZE = 64 * 1024


@runtime_checkable
class ToolSource(Protocol):
    """Anything that can enumerate tool declarations."""

    async def discover(self) -> list[ToolDeclaration]: ...


class CommandToolSource:
    """Discovers tools from the stdout of a shell command.

    stdout and stderr are each capped at *max_output_bytes*; the process is
    killed as soon as either cap is exceeded.
    """

    def __init__(
        self,
        command: str,
        *,
        env: dict[str, str] | None = None,
        max_output_bytes: int = MAX_OUTPUT_BYTES,
    ) -> None:
        self._command = command
        self._env = env
        self._max_output_bytes = max_output_bytes

    async def discover(self) -> list[ToolDeclaration]:
        """Run the command and parse its declarations.

        Raises:
            ToolDiscoveryError: If the command cannot start, exceeds the
                output cap, exits non-zero, or prints something other than
                a JSON array.
        """
        try:
            parts = shlex.split(self._command)
        except ValueError as exc:
            raise ToolDiscoveryError(self._command, str(exc)) from exc
        if not parts:
            raise ToolDiscoveryError(self._command, "empty command")

        try:
            proc = await asyncio.create_subprocess_exec(
                *parts,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._env,
            )
        except OSError as exc:
            raise ToolDiscoveryError(self._command, str(exc)) from exc

        (stdout, out_exceeded), (stderr, err_exceeded) = await asyncio.gather(
            self._read_capped(proc, proc.stdout),
            self._read_capped(proc, proc.stderr),
        )
        returncode = await proc.wait()

        if out_exceeded or err_exceeded:
            msg = f"output exceeded size limit of {self._max_output_bytes} bytes"
            raise ToolDiscoveryError(self._command, msg)
        if returncode != 0:
            logger.error(
                "Tool discovery command exited with %s: %s",
                returncode,
                stderr.decode("utf-8", errors="replace").strip(),
            )
            raise ToolDiscoveryError(self._command, f"exit code {returncode}")

        return parse_declarations(stdout.decode("utf-8", errors="replace"), self._command)

    async def _read_capped(
        self,
        proc: asyncio.subprocess.Process,
        stream: asyncio.StreamReader | None,
    ) -> tuple[bytes, bool]:
        """Read *stream* to EOF; kill *proc* and stop once the cap is exceeded."""
        if stream is None:
            return b"", False
        chunks: list[bytes] = []
        size = 0
        while True:
            chunk = await stream.read(_READ_SIZE)
            if not chunk:
                return b"".join(chunks), False
            if size + len(chunk) > self._max_output_bytes:
                _kill(proc)
                return b"".join(chunks), True
            size += len(chunk)
            chunks.append(chunk)


def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        pass


def parse_declarations(output: str, command: str = "") -> list[ToolDeclaration]:
    """Extract sanitized declarations from discovery output.

    Nameless entries are skipped with a warning; non-object ``parameters``
    become ``{}``.
    """
    try:
        items: Any = json.loads(output.strip())
    except json.JSONDecodeError as exc:
        raise ToolDiscoveryError(command, f"invalid JSON output: {exc}") from exc
    if not isinstance(items, list):
        raise ToolDiscoveryError(command, "output is not a JSON array of tools")

    functions: list[dict[str, Any]] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        wrapped = item.get("function_declarations", item.get("functionDeclarations"))
        if isinstance(wrapped, list):
            functions.extend(f for f in wrapped if isinstance(f, dict))
        elif item.get("name"):
            functions.append(item)

    declarations: list[ToolDeclaration] = []
    for func in functions:
        name = func.get("name")
        if not name or not isinstance(name, str):
            logger.warning("Discovered a tool with no name; skipping")
            continue
        parameters = func.get("parameters")
        if not isinstance(parameters, dict):
            parameters = {}
        sanitize_parameters(parameters)
        declarations.append(
            ToolDeclaration(
                name=name,
                description=func.get("description") or "",
                parameters=parameters,
            )
        )
    return declarations


async def discover_tools(command: str, *, env: dict[str, str] | None = None) -> list[ToolDeclaration]:
    """Run *command* and return the tool declarations it prints."""
    return await CommandToolSource(command, env=env).discover()
