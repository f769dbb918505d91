"""Normalized content model, capability flags, and the transpiler protocol."""

from contentgen.core.interface.capabilities import BackendCapabilities, resolve_capabilities
from contentgen.core.interface.models import (
    Candidate,
    Content,
    ContentEmbedding,
    CountTokensResponse,
    EmbedContentRequest,
    EmbedContentResponse,
    FunctionCall,
    FunctionResponse,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    InlineData,
    Part,
    TextPart,
    ToolDeclaration,
    UsageMetadata,
)
from contentgen.core.interface.transpiler import Transpiler

__all__ = [
    "BackendCapabilities",
    "Candidate",
    "Content",
    "ContentEmbedding",
    "CountTokensResponse",
    "EmbedContentRequest",
    "EmbedContentResponse",
    "FunctionCall",
    "FunctionResponse",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "GenerationConfig",
    "InlineData",
    "Part",
    "TextPart",
    "ToolDeclaration",
    "Transpiler",
    "UsageMetadata",
    "resolve_capabilities",
]
