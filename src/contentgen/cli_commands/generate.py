"""``contentgen generate``: send one prompt to a backend."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from contentgen.cli_commands._output import console, print_response, print_usage
from contentgen.config import GeneratorConfig, Settings, load_settings
from contentgen.core.interface.models import (
    Content,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
)
from contentgen.core.tools.discovery import discover_tools
from contentgen.errors import ContentGenerationError
from contentgen.generators.registry import create_generator


@click.command()
@click.argument("prompt")
@click.option("--provider", "-p", default=None, help="Provider id (default: from settings, else openai-compatible).")
@click.option("--model", "-m", default=None, help="Model id or Azure deployment name.")
@click.option("--base-url", default=None, help="Override the backend base URL.")
@click.option("--settings", "settings_path", type=click.Path(exists=True), default=None, help="YAML settings file.")
@click.option("--tools", "tools_command", default=None, help="Command that prints tool declarations as JSON.")
@click.option("--system", default=None, help="System instruction.")
@click.option("--stream/--no-stream", default=True, help="Stream the answer as it is produced.")
@click.option("--telemetry", is_flag=True, help="Print OpenTelemetry spans to stdout.")
def generate(
    prompt: str,
    provider: str | None,
    model: str | None,
    base_url: str | None,
    settings_path: str | None,
    tools_command: str | None,
    system: str | None,
    stream: bool,
    telemetry: bool,
) -> None:
    """Send PROMPT to a backend and print the answer."""
    if telemetry:
        from contentgen.utils.telemetry import configure_telemetry

        try:
            configure_telemetry()
        except ImportError as exc:
            console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    try:
        settings = load_settings(Path(settings_path)) if settings_path else Settings()
        provider_id = provider or settings.provider
        config = _resolve_config(settings, provider_id, model, base_url)
        tools_command = tools_command or settings.tool_discovery_command
        asyncio.run(_generate(provider_id, config, prompt, system, tools_command, stream))
    except ContentGenerationError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)


def _resolve_config(
    settings: Settings,
    provider_id: str,
    model: str | None,
    base_url: str | None,
) -> GeneratorConfig:
    config = settings.generator or GeneratorConfig.from_env(provider_id, model)
    updates: dict[str, str] = {}
    if model and settings.generator is not None:
        updates["model"] = model
    if base_url:
        updates["base_url"] = base_url.rstrip("/")
    return config.model_copy(update=updates) if updates else config


async def _generate(
    provider_id: str,
    config: GeneratorConfig,
    prompt: str,
    system: str | None,
    tools_command: str | None,
    stream: bool,
) -> None:
    tools = await discover_tools(tools_command) if tools_command else []
    request = GenerateContentRequest(
        model=config.model,
        contents=[Content.user(prompt)],
        config=GenerationConfig(system_instruction=system),
        tools=tools,
    )
    generator = create_generator(provider_id, config)
    try:
        if not stream:
            print_response(await generator.generate_content(request))
            return
        last: GenerateContentResponse | None = None
        async for frame in generator.generate_content_stream(request):
            if frame.text:
                console.print(frame.text, end="", markup=False, highlight=False)
            for call in frame.function_calls:
                console.print(f"\n[magenta]tool call[/magenta] {call.name}({call.args})")
            if frame.usage is not None:
                last = frame
        console.print()
        if last is not None:
            print_usage(last)
    finally:
        aclose = getattr(generator, "aclose", None)
        if aclose is not None:
            await aclose()
