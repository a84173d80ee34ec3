"""Typed snapshots of a registry using Pydantic BaseModel.

Subclass ``AppConfig`` and declare fields named after registry variables.
An optional ``Meta`` inner class sets a name prefix::

    class ServerConfig(AppConfig):
        class Meta:
            prefix = "server"

        port: int = 8000
        debug: bool = False

    registry.parse_file("server.conf")      # server_port 9000
    cfg = ServerConfig.from_registry(registry)
    cfg.port                                # 9000, validated as int
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from ._registry import Registry

TConfig = TypeVar("TConfig", bound="AppConfig")


class AppConfig(BaseModel):
    """Base class for declarative, typed views over a :class:`Registry`."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    class Meta:
        prefix: str = ""

    @classmethod
    def from_registry(cls: type[TConfig], registry: Registry) -> TConfig:
        """Build a validated instance from the registry's current values.

        Resolution per field:
        1. Registry variable ``{prefix}_{field_name}`` (or ``field_name``),
           through the registry's alias and case rules
        2. Omit -- let Pydantic use the field default or raise ``ValidationError``
        """
        prefix = getattr(cls.Meta, "prefix", "")
        raw_data: dict[str, Any] = {}

        for field_name in cls.model_fields:
            name = f"{prefix}_{field_name}" if prefix else field_name
            if not registry.is_defined(name) or not registry.has_value(name):
                continue
            raw_data[field_name] = registry.get(name)

        return cls.model_validate(raw_data)
