"""
promptweave - A markup template engine for composing structured LLM prompts

promptweave compiles element trees into template units and renders them
with asynchronous producers, deferred cross-references, diagnostics and
post-execution actions.
"""

from importlib.metadata import version

from promptweave.compiler import CompiledTemplate, compile_template
from promptweave.components import Component, ComponentRegistry, default_registry
from promptweave.config import RenderOptions
from promptweave.core import DeferredReference, Element, el, fragment, ref
from promptweave.diagnostics import Diagnostic, Severity
from promptweave.render import RenderResult, render, render_sync

__version__ = version("promptweave")

__all__ = [
    "__version__",
    "CompiledTemplate",
    "Component",
    "ComponentRegistry",
    "DeferredReference",
    "Diagnostic",
    "Element",
    "RenderOptions",
    "RenderResult",
    "Severity",
    "compile_template",
    "default_registry",
    "el",
    "fragment",
    "ref",
    "render",
    "render_sync",
]
