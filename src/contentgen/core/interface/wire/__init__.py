"""Typed wire schemas, one module per backend family."""
