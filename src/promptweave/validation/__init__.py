"""
Schema validation of element attribute bags.
"""

from promptweave.validation.schema import effective_schema, validate_props

__all__ = ["effective_schema", "validate_props"]
