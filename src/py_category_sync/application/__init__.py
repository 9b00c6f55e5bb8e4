"""Application layer: ports, result types, DTOs, persisted sync state and use cases."""

from . import dto, ports, results, use_cases_async  # noqa: F401

__all__ = ["dto", "ports", "results", "use_cases_async"]
