"""Static model catalog.

Known models for the backends whose model ids are fixed by the vendor
(Anthropic) or curated for local use (LM Studio). OpenAI-compatible and
local-LLM servers accept arbitrary ids and are not listed.
"""

from __future__ import annotations

from pydantic import BaseModel


class ModelInfo(BaseModel):
    """Catalog entry describing one model."""

    id: str
    name: str
    description: str = ""
    capabilities: list[str] = []
    category: str = "general"
    is_default: bool = False


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------

ANTHROPIC_MODELS: list[ModelInfo] = [
    ModelInfo(
        id="claude-sonnet-4-20250514",
        name="Claude Sonnet 4",
        description="Latest Claude 4 Sonnet model with enhanced capabilities",
        capabilities=["Text", "Code", "Analysis", "Vision", "Advanced Reasoning"],
        is_default=True,
    ),
    ModelInfo(
        id="claude-opus-4-20250514",
        name="Claude Opus 4",
        description="Most capable Claude 4 model for complex tasks",
        capabilities=["Text", "Code", "Analysis", "Creative Writing", "Complex Reasoning", "Vision"],
    ),
    ModelInfo(
        id="claude-3-7-sonnet-20250219",
        name="Claude Sonnet 3.7",
        description="Advanced Claude 3.7 Sonnet model",
        capabilities=["Text", "Code", "Analysis", "Vision", "Advanced Reasoning"],
    ),
    ModelInfo(
        id="claude-3-5-sonnet-20241022",
        name="Claude Sonnet 3.5",
        description="Proven Claude 3.5 Sonnet model",
        capabilities=["Text", "Code", "Analysis", "Vision", "Advanced Reasoning"],
    ),
    ModelInfo(
        id="claude-3-5-haiku-20241022",
        name="Claude Haiku 3.5",
        description="Fast and efficient Claude 3.5 model",
        capabilities=["Text", "Code", "Analysis"],
    ),
]

# ---------------------------------------------------------------------------
# LM Studio (MLX builds)
# ---------------------------------------------------------------------------

LM_STUDIO_MODELS: list[ModelInfo] = [
    ModelInfo(
        id="mistralai/devstral-small-2507",
        name="Devstral Small (MLX)",
        description="Mistral AI Devstral small model optimized for coding tasks on MLX",
        capabilities=["Code", "Programming", "Analysis", "Debugging"],
        category="coding",
        is_default=True,
    ),
    ModelInfo(
        id="qwen/qwen3-coder-30b",
        name="Qwen3 Coder 30B (MLX)",
        description="Large Qwen3 coder model with 30B parameters for complex coding tasks",
        capabilities=["Code", "Programming", "Complex Analysis", "Architecture Design"],
        category="coding",
    ),
    ModelInfo(
        id="text-embedding-nomic-embed-text-v1.5",
        name="Nomic Embed Text v1.5",
        description="High-quality text embedding model for semantic search and similarity",
        capabilities=["Embeddings", "Semantic Search", "Text Analysis"],
        category="embedding",
    ),
    ModelInfo(
        id="mlx-community/Llama-3.2-3B-Instruct-4bit",
        name="Llama 3.2 3B Instruct (MLX)",
        description="Fast and efficient Llama 3.2 3B model optimized for MLX",
        capabilities=["Text", "Code", "Instruct", "General Purpose"],
    ),
    ModelInfo(
        id="mlx-community/Llama-3.1-8B-Instruct-4bit",
        name="Llama 3.1 8B Instruct (MLX)",
        description="Balanced Llama 3.1 8B model with MLX optimization",
        capabilities=["Text", "Code", "Analysis", "Instruct"],
    ),
    ModelInfo(
        id="mlx-community/Qwen2.5-7B-Instruct-4bit",
        name="Qwen2.5 7B Instruct (MLX)",
        description="High-performance Qwen2.5 7B model for Apple Silicon",
        capabilities=["Text", "Code", "Multilingual", "Instruct"],
    ),
    ModelInfo(
        id="mlx-community/DeepSeek-Coder-V2-Lite-Instruct-4bit",
        name="DeepSeek Coder V2 Lite (MLX)",
        description="Specialized coding model optimized for MLX",
        capabilities=["Code", "Programming", "Analysis"],
        category="coding",
    ),
]

KNOWN_MODELS: dict[str, list[ModelInfo]] = {
    "anthropic": ANTHROPIC_MODELS,
    "lm-studio": LM_STUDIO_MODELS,
}

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"
DEFAULT_LM_STUDIO_MODEL = "mistralai/devstral-small-2507"
DEFAULT_LOCAL_LLM_MODEL = "llama3.1:8b"


def default_model(provider: str) -> str | None:
    """Return the catalog default for *provider*, if it has one."""
    for info in KNOWN_MODELS.get(provider, []):
        if info.is_default:
            return info.id
    return None


def get_model_info(provider: str, model_id: str) -> ModelInfo | None:
    for info in KNOWN_MODELS.get(provider, []):
        if info.id == model_id:
            return info
    return None


def is_known_model(provider: str, model_id: str) -> bool:
    return get_model_info(provider, model_id) is not None


def models_by_category(provider: str, category: str) -> list[ModelInfo]:
    return [m for m in KNOWN_MODELS.get(provider, []) if m.category == category]
