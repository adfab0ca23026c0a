"""
Core type definitions for the promptweave template engine.

This module contains type aliases shared by the compiler passes, the
evaluator and the component contract.
"""

from typing import Any

PathSegment = str | int

PropsDict = dict[str, Any]

ResolvedValue = Any

InvocationId = str
