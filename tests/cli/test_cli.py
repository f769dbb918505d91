"""Tests for the ``contentgen`` CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from contentgen import __version__
from contentgen.cli import main
from contentgen.core.interface.models import (
    FunctionCall,
    GenerateContentResponse,
    TextPart,
    ToolDeclaration,
    UsageMetadata,
)
from contentgen.errors import HttpError, ToolDiscoveryError
from contentgen.generators.registry import register_generator, reset_registry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _clean_registry() -> None:
    reset_registry()


def _fake_generator() -> MagicMock:
    generator = MagicMock()
    generator.aclose = AsyncMock()
    return generator


class TestBasics:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("generate", "count-tokens", "providers", "models", "tools"):
            assert command in result.output

    def test_count_tokens(self) -> None:
        result = CliRunner().invoke(main, ["count-tokens", "abcdefgh"])
        assert result.exit_code == 0
        assert "2 tokens" in result.output


class TestProviders:
    def test_builtins(self) -> None:
        result = CliRunner().invoke(main, ["providers"])
        assert result.exit_code == 0
        for provider_id in ("openai-compatible", "local-llm", "lm-studio", "azure", "anthropic"):
            assert provider_id in result.output
        assert "(registered)" not in result.output

    def test_registered_marked(self) -> None:
        register_generator("native", MagicMock())
        result = CliRunner().invoke(main, ["providers"])
        assert "native (registered)" in result.output


class TestModels:
    def test_all_catalogs(self) -> None:
        result = CliRunner().invoke(main, ["models"])
        assert result.exit_code == 0
        assert "anthropic models" in result.output
        assert "lm-studio models" in result.output

    def test_one_provider(self) -> None:
        result = CliRunner().invoke(main, ["models", "-p", "anthropic"])
        assert result.exit_code == 0
        assert "anthropic models" in result.output
        assert "lm-studio models" not in result.output

    def test_unknown_provider(self) -> None:
        result = CliRunner().invoke(main, ["models", "-p", "gemini"])
        assert result.exit_code == 0
        assert "No model catalog for provider: gemini" in result.output


# ---------------------------------------------------------------------------
# tools
# ---------------------------------------------------------------------------


class TestToolsDiscover:
    def test_discover_tools(self) -> None:
        declarations = [ToolDeclaration(name="read_file", description="Read a file")]
        with patch("contentgen.cli_commands.tools.discover_tools", AsyncMock(return_value=declarations)):
            result = CliRunner().invoke(main, ["tools", "discover", "my-tools --list"])
        assert result.exit_code == 0
        assert "read_file" in result.output

    def test_discover_json(self) -> None:
        declarations = [ToolDeclaration(name="read_file", description="Read a file")]
        with patch("contentgen.cli_commands.tools.discover_tools", AsyncMock(return_value=declarations)):
            result = CliRunner().invoke(main, ["tools", "discover", "my-tools", "--json"])
        assert result.exit_code == 0
        assert '"name": "read_file"' in result.output

    def test_discover_no_tools(self) -> None:
        with patch("contentgen.cli_commands.tools.discover_tools", AsyncMock(return_value=[])):
            result = CliRunner().invoke(main, ["tools", "discover", "my-tools"])
        assert result.exit_code == 0
        assert "No tools discovered" in result.output

    def test_discover_error(self) -> None:
        error = ToolDiscoveryError("bad-tools", "exited with status 1")
        with patch("contentgen.cli_commands.tools.discover_tools", AsyncMock(side_effect=error)):
            result = CliRunner().invoke(main, ["tools", "discover", "bad-tools"])
        assert result.exit_code == 0
        assert "Discovery error" in result.output


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


class TestGenerate:
    @pytest.fixture(autouse=True)
    def _env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.delenv("OPENAI_MODEL", raising=False)
        monkeypatch.delenv("CUSTOM_BASE_URL", raising=False)
        monkeypatch.delenv("CUSTOM_TIMEOUT", raising=False)

    def test_no_stream(self) -> None:
        generator = _fake_generator()
        generator.generate_content = AsyncMock(
            return_value=GenerateContentResponse.from_parts(
                [TextPart(text="Bonjour")],
                usage=UsageMetadata(prompt_tokens=5, completion_tokens=2, total_tokens=7),
            )
        )
        with patch("contentgen.cli_commands.generate.create_generator", return_value=generator) as factory:
            result = CliRunner().invoke(
                main,
                ["generate", "Say hello in French", "--no-stream", "--system", "Be brief."],
            )

        assert result.exit_code == 0, result.output
        assert "Bonjour" in result.output
        assert "total=7" in result.output
        provider_id, config = factory.call_args.args
        assert provider_id == "openai-compatible"
        assert config.api_key == "sk-test"
        request = generator.generate_content.call_args.args[0]
        assert request.config.system_instruction == "Be brief."
        assert request.contents[0].text == "Say hello in French"
        generator.aclose.assert_awaited_once()

    def test_stream(self) -> None:
        async def frames(request: Any, **kwargs: Any) -> AsyncIterator[GenerateContentResponse]:
            yield GenerateContentResponse.text_chunk("Bon")
            yield GenerateContentResponse.text_chunk("jour")
            yield GenerateContentResponse.from_parts(
                [FunctionCall(id="c1", name="get_weather", args={"location": "Paris"})],
                finish_reason="tool_calls",
            )

        generator = _fake_generator()
        generator.generate_content_stream = frames
        with patch("contentgen.cli_commands.generate.create_generator", return_value=generator):
            result = CliRunner().invoke(main, ["generate", "hi"])

        assert result.exit_code == 0, result.output
        assert "Bonjour" in result.output
        assert "get_weather" in result.output
        generator.aclose.assert_awaited_once()

    def test_backend_error(self) -> None:
        generator = _fake_generator()
        generator.generate_content = AsyncMock(
            side_effect=HttpError("OpenAI", 429, guidance="Rate limit exceeded. Please try again later.")
        )
        with patch("contentgen.cli_commands.generate.create_generator", return_value=generator):
            result = CliRunner().invoke(main, ["generate", "hi", "--no-stream"])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert "Rate limit exceeded" in result.output
        generator.aclose.assert_awaited_once()

    def test_missing_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OPENAI_API_KEY")
        result = CliRunner().invoke(main, ["generate", "hi"])
        assert result.exit_code == 1
        assert "OPENAI_API_KEY" in result.output

    def test_unknown_provider(self) -> None:
        result = CliRunner().invoke(main, ["generate", "hi", "-p", "gemini", "-m", "x"])
        assert result.exit_code == 1
        assert "gemini" in result.output

    def test_settings_file(self, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text(
            "provider: anthropic\n"
            "generator:\n"
            "  model: claude-sonnet-4-20250514\n"
            "  api_key: sk-ant\n",
            encoding="utf-8",
        )
        generator = _fake_generator()
        generator.generate_content = AsyncMock(return_value=GenerateContentResponse.from_parts([]))
        with patch("contentgen.cli_commands.generate.create_generator", return_value=generator) as factory:
            result = CliRunner().invoke(
                main,
                ["generate", "hi", "--no-stream", "--settings", str(settings), "-m", "claude-opus-4-20250514"],
            )

        assert result.exit_code == 0, result.output
        provider_id, config = factory.call_args.args
        assert provider_id == "anthropic"
        assert config.model == "claude-opus-4-20250514"
        assert config.api_key == "sk-ant"

    def test_tools_command_discovered(self) -> None:
        generator = _fake_generator()
        generator.generate_content = AsyncMock(return_value=GenerateContentResponse.from_parts([]))
        declarations = [ToolDeclaration(name="ls")]
        with (
            patch("contentgen.cli_commands.generate.create_generator", return_value=generator),
            patch("contentgen.cli_commands.generate.discover_tools", AsyncMock(return_value=declarations)) as disc,
        ):
            result = CliRunner().invoke(main, ["generate", "hi", "--no-stream", "--tools", "my-tools"])

        assert result.exit_code == 0, result.output
        disc.assert_awaited_once_with("my-tools")
        request = generator.generate_content.call_args.args[0]
        assert [t.name for t in request.tools] == ["ls"]
