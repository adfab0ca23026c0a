"""
Section delimiters for structural components.
"""

from typing import Literal

from inflection import titleize, underscore

Delimiter = Literal["xml", "markdown", "none"]


def section_name(tag: str) -> str:
    """Return the snake_case section name for a component tag (``SuccessCriteria`` -> ``success_criteria``)."""
    return underscore(tag.replace(".", "_"))


def wrap_with_delimiter(content: str, name: str, delimiter: Delimiter = "xml") -> str:
    """
    Wrap section content with a delimiter.

    Params:
        content: Section text
        name: Section name in snake_case
        delimiter: ``xml`` for ``<name>`` tags, ``markdown`` for a heading,
            ``none`` for the bare content

    Returns:
        The wrapped section, ending with a newline unless ``none``
    """
    if delimiter == "none":
        return content
    if delimiter == "markdown":
        return f"## {titleize(name)}\n\n{content}\n"
    return f"<{name}>\n{content}\n</{name}>\n"
