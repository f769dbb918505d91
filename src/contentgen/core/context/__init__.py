"""Context accounting: token estimation."""

from contentgen.core.context.counter import EstimatingCounter, TokenCounter

__all__ = ["EstimatingCounter", "TokenCounter"]
