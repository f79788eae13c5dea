"""Semantic analysis for Ruby syntax trees: nodes, scopes, types and the analyzer."""

__version__ = "0.1.0"
__all__ = ["analyzer", "nodes", "scope", "types"]