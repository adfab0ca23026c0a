"""
Render configuration.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RenderOptions(BaseModel):
    """
    Options for one render call.

    Accepts both snake_case names and their camelCase aliases
    (``ignoreWarnings``, ``throwOnWarnings``).

    Params:
        inputs: Caller-supplied input values, keyed by input name
        env: Free-form environment values exposed on the render context
        trim: Strip leading and trailing whitespace from the output
        ignore_warnings: Warning codes removed from the result
        throw_on_warnings: Escalate every remaining warning to an error
        required_elements: Tags that must render at least once (empty disables the check)
        check_conflicts: Run the contradictory-instruction rules
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    inputs: dict[str, Any] = Field(default_factory=dict)
    env: dict[str, Any] = Field(default_factory=dict)
    trim: bool = True
    ignore_warnings: list[str] = Field(default_factory=list)
    throw_on_warnings: bool = False
    required_elements: tuple[str, ...] = ("Task",)
    check_conflicts: bool = True

    @classmethod
    def build(cls, options: "RenderOptions | Mapping[str, Any] | None" = None, **overrides: Any) -> "RenderOptions":
        """
        Normalize the ways a caller can pass options.

        Params:
            options: Options object, plain mapping, or None for defaults
            overrides: Individual options applied on top

        Returns:
            Validated RenderOptions

        Raises:
            pydantic.ValidationError: On unknown keys or invalid values
        """
        if isinstance(options, RenderOptions):
            data = options.model_dump()
        else:
            data = dict(options or {})
        data.update(overrides)
        return cls.model_validate(data)
