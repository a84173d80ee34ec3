"""Pydantic models for registry settings and per-variable options.

Option keys are matched case-insensitively. Each field lists its accepted
spellings in ``validation_alias`` so the historical upper-case keywords
(``ARGCOUNT``, ``CMDARG``, ``ENDOFARGS`` ...) keep working::

    registry.define("verbose", {"ALIAS": "v", "ARGCOUNT": 0})
    registry.define("verbose", aliases="v", argument_required=False)
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Mapping, Type, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from ._types import ConfigError, InvalidOptionError, NotInvocableError

TOptions = TypeVar("TOptions", bound=BaseModel)


class VariableSpec(BaseModel):
    """Options accepted by :meth:`Registry.define`."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    default: Any = None
    argument_required: bool = Field(
        default=False,
        validation_alias=AliasChoices("argument_required", "argcount"),
    )
    expand: bool = True
    validator: Any = Field(
        default=None,
        validation_alias=AliasChoices("validator", "validate"),
    )
    on_change: Callable[..., Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("on_change", "action"),
    )
    aliases: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("aliases", "alias"),
    )
    # ``True`` asks for generated ``-name`` / ``-alias`` triggers.
    command_triggers: tuple[str, ...] | bool = Field(
        default=(),
        validation_alias=AliasChoices("command_triggers", "cmdarg"),
    )

    callable_fields: ClassVar[tuple[str, ...]] = ("on_change",)

    @field_validator("argument_required", mode="before")
    @classmethod
    def _argument_count(cls, value: Any) -> Any:
        # ARGCOUNT historically took a count; any non-zero count needs a value.
        if isinstance(value, (int, float)):
            return bool(value)
        return value

    @field_validator("aliases", mode="before")
    @classmethod
    def _one_or_many_aliases(cls, value: Any) -> Any:
        return _one_or_many(value)

    @field_validator("command_triggers", mode="before")
    @classmethod
    def _one_or_many_triggers(cls, value: Any) -> Any:
        # CMDARG => 1 historically meant "generate triggers".
        if isinstance(value, (bool, int)):
            return bool(value)
        return _one_or_many(value)


class RegistrySettings(BaseModel):
    """Options accepted by the :class:`Registry` constructor."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    case_sensitive: bool = Field(
        default=False,
        validation_alias=AliasChoices("case_sensitive", "case"),
    )
    end_of_args: str = Field(
        default="--",
        validation_alias=AliasChoices("end_of_args", "endofargs"),
    )
    cmd_env: str | None = Field(
        default=None,
        validation_alias=AliasChoices("cmd_env", "cmdenv"),
    )
    file_parse: Callable[..., Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("file_parse", "fileparse"),
    )
    line_parse: Callable[..., Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("line_parse", "lineparse"),
    )
    cmd_parse: Callable[..., Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("cmd_parse", "cmdparse"),
    )
    arg_parse: Callable[..., Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("arg_parse", "argparse"),
    )
    error: Callable[..., Any] | None = None
    global_options: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("global_options", "global"),
    )

    callable_fields: ClassVar[tuple[str, ...]] = (
        "file_parse",
        "line_parse",
        "cmd_parse",
        "arg_parse",
        "error",
    )


# ---------------------------------------------------------------------------
# Key normalisation
# ---------------------------------------------------------------------------


def _one_or_many(value: Any) -> Any:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return value


def _accepted_keys(model: Type[BaseModel]) -> dict[str, str]:
    """Map every accepted spelling (lower case) to its field name."""
    keys: dict[str, str] = {}
    for field_name, info in model.model_fields.items():
        keys[field_name] = field_name
        alias = info.validation_alias
        if isinstance(alias, AliasChoices):
            for choice in alias.choices:
                if isinstance(choice, str):
                    keys[choice] = field_name
    return keys


def canonical_options(
    model: Type[BaseModel],
    options: Mapping[str, Any],
) -> tuple[dict[str, Any], list[ConfigError]]:
    """Rename option keys to field names, dropping unknown and non-callable ones.

    Returns the cleaned options and the errors found, in input order.
    """
    accepted = _accepted_keys(model)
    callable_fields = getattr(model, "callable_fields", ())
    clean: dict[str, Any] = {}
    errors: list[ConfigError] = []

    for key, value in options.items():
        field_name = accepted.get(str(key).lower())
        if field_name is None:
            errors.append(InvalidOptionError(str(key)))
            continue
        if field_name in callable_fields and value is not None and not callable(value):
            errors.append(NotInvocableError(str(key)))
            continue
        clean[field_name] = value

    return clean, errors


def build_options(
    model: Type[TOptions],
    options: Mapping[str, Any],
) -> tuple[TOptions, list[ConfigError]]:
    """Validate canonical options, discarding any field pydantic rejects.

    A rejected field falls back to its default so one bad option never
    prevents the rest from taking effect.
    """
    data = dict(options)
    errors: list[ConfigError] = []

    try:
        return model.model_validate(data), errors
    except ValidationError as exc:
        for detail in exc.errors():
            field_name = str(detail["loc"][0]) if detail["loc"] else ""
            if field_name in data:
                data.pop(field_name)
                errors.append(
                    InvalidOptionError(field_name, f"has an invalid value: {detail['msg']}")
                )

    return model.model_validate(data), errors
