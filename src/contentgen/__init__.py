"""contentgen: one content-generation interface over many LLM backends."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from contentgen.config import GeneratorConfig as GeneratorConfig
    from contentgen.core.interface.models import Content as Content
    from contentgen.core.interface.models import GenerateContentRequest as GenerateContentRequest
    from contentgen.core.interface.models import GenerateContentResponse as GenerateContentResponse
    from contentgen.generators.registry import create_generator as create_generator
    from contentgen.generators.registry import register_generator as register_generator

_EXPORTS = {
    "GeneratorConfig": "contentgen.config",
    "Content": "contentgen.core.interface.models",
    "GenerateContentRequest": "contentgen.core.interface.models",
    "GenerateContentResponse": "contentgen.core.interface.models",
    "create_generator": "contentgen.generators.registry",
    "register_generator": "contentgen.generators.registry",
}


def __getattr__(name: str) -> object:
    module_path = _EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'contentgen' has no attribute {name!r}")
