"""Shared CLI output formatters."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from contentgen.core.interface.catalog import ModelInfo  # noqa: TC001
from contentgen.core.interface.models import GenerateContentResponse, ToolDeclaration  # noqa: TC001

console = Console()


def print_tools_table(declarations: list[ToolDeclaration]) -> None:
    """Pretty-print tool declarations as a table."""
    table = Table(title="Discovered Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Parameters")

    for decl in declarations:
        params = (decl.parameters or {}).get("properties", {})
        table.add_row(decl.name, _truncate(decl.description), ", ".join(params) or "-")

    console.print(table)


def print_models_table(provider: str, models: list[ModelInfo]) -> None:
    """Pretty-print catalog entries for one provider."""
    table = Table(title=f"{provider} models")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Description")

    for info in models:
        model_id = f"{info.id} (default)" if info.is_default else info.id
        table.add_row(model_id, info.name, info.category, _truncate(info.description))

    console.print(table)


def print_response(response: GenerateContentResponse) -> None:
    """Print answer text, any tool calls, and usage."""
    if response.text:
        console.print(response.text)
    for call in response.function_calls:
        console.print(f"[magenta]tool call[/magenta] {call.name}({call.args})")
    print_usage(response)


def print_usage(response: GenerateContentResponse) -> None:
    usage = response.usage
    if usage is None:
        return
    console.print(
        f"[dim]tokens: prompt={usage.prompt_tokens} "
        f"completion={usage.completion_tokens} total={usage.total_tokens}[/dim]"
    )


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
