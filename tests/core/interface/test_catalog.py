"""Tests for the static model catalog."""

from __future__ import annotations

from contentgen.core.interface.catalog import (
    ANTHROPIC_MODELS,
    DEFAULT_ANTHROPIC_MODEL,
    KNOWN_MODELS,
    default_model,
    get_model_info,
    is_known_model,
    models_by_category,
)


class TestCatalog:
    def test_one_default_per_provider(self) -> None:
        for models in KNOWN_MODELS.values():
            assert sum(1 for m in models if m.is_default) == 1

    def test_default_model(self) -> None:
        assert default_model("anthropic") == DEFAULT_ANTHROPIC_MODEL
        assert default_model("openai-compatible") is None

    def test_lookup(self) -> None:
        info = get_model_info("anthropic", DEFAULT_ANTHROPIC_MODEL)
        assert info is not None
        assert info.name
        assert get_model_info("anthropic", "gpt-4o") is None

    def test_is_known_model(self) -> None:
        assert is_known_model("anthropic", ANTHROPIC_MODELS[-1].id)
        assert not is_known_model("lm-studio", "claude-3-opus")

    def test_models_by_category(self) -> None:
        coding = models_by_category("lm-studio", "coding")
        assert coding
        assert all(m.category == "coding" for m in coding)
