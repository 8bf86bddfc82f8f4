"""Core business logic: scorers, citation tracking, brand health, models.

This module is framework-agnostic. It has no dependency on MCP, SQLAlchemy,
or any server framework; persistence and language-model access come in
through the protocols in ``core.interfaces``.
"""
