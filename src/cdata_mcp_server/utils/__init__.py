"""Utility modules for the CData MCP Server."""

from .validators import ArgumentValidator, FieldSpec, ParameterSchema

__all__ = ['ArgumentValidator', 'FieldSpec', 'ParameterSchema']
