"""
Attribute bag validation against component schemas.

Component schemas are pydantic models. Validation coerces values the way
pydantic's lax mode does ("3" -> 3 for an int field). Unknown attributes are
dropped unless the component is permissive, in which case they pass through
untouched.
"""

from pydantic import BaseModel, ConfigDict, ValidationError

from promptweave.core.types import PropsDict
from promptweave.diagnostics.models import Diagnostic
from promptweave.exceptions.core import SchemaValidationError


_permissive_cache: dict[type[BaseModel], type[BaseModel]] = {}


def effective_schema(schema: type[BaseModel], permissive: bool) -> type[BaseModel]:
    """
    Return the schema variant used for validation.

    Params:
        schema: Component schema model
        permissive: Whether unknown attributes are passed through

    Returns:
        The schema itself, or a subclass configured with ``extra="allow"``
        when permissive
    """
    if not permissive or schema.model_config.get("extra") == "allow":
        return schema
    if schema not in _permissive_cache:
        _permissive_cache[schema] = type(
            schema.__name__,
            (schema,),
            {"model_config": ConfigDict(extra="allow"), "__module__": schema.__module__},
        )
    return _permissive_cache[schema]


def validate_props(
    component_name: str,
    props: PropsDict,
    schema: type[BaseModel] | None,
    permissive: bool = False,
    owner: str | None = None,
) -> tuple[PropsDict, list[Diagnostic]]:
    """
    Validate and coerce an attribute bag.

    Params:
        component_name: Tag of the element, used in messages
        props: Attribute values with deferred references already substituted
        schema: Component schema, or None to skip validation
        permissive: Pass unknown attributes through untouched
        owner: Invocation id recorded on diagnostics

    Returns:
        Tuple of (validated props, diagnostics). On failure the original props
        are returned with one diagnostic per violated constraint.
    """
    if schema is None:
        return dict(props), []

    model = effective_schema(schema, permissive)
    try:
        validated = model.model_validate(props)
    except ValidationError as exc:
        diagnostics = []
        for error in exc.errors():
            loc = tuple(error.get("loc", ()))
            violation = SchemaValidationError(
                component_name,
                error["msg"],
                attribute=str(loc[0]) if loc else None,
                path=loc[1:],
                code=error["type"],
                owner=owner,
            )
            diagnostics.append(violation.to_diagnostic())
        return dict(props), diagnostics

    result = {name: getattr(validated, name) for name in type(validated).model_fields}
    if validated.model_extra:
        result.update(validated.model_extra)
    return result, []
