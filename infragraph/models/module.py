"""Input records: per-module configuration, environment, applications.

These mirror what the external config parser produces. ``from_dict``
constructors accept the camelCase wire keys (``managedResources``) as
well as snake_case, and default every missing collection to empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from infragraph.errors import InvalidInputError


class _Missing:
    """Sentinel for a variable declared without a default."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present, non-None value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _as_dict(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


@dataclass
class VariableDef:
    """A declared input variable."""

    type: Any = "any"
    description: str = ""
    default: Any = MISSING
    sensitive: bool = False
    validation: list[Any] = field(default_factory=list)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VariableDef:
        validation = data.get("validation") or []
        return cls(
            type=data.get("type") or "any",
            description=data.get("description") or "",
            default=data["default"] if "default" in data else MISSING,
            sensitive=bool(data.get("sensitive", False)),
            validation=list(validation) if isinstance(validation, list) else [validation],
        )


@dataclass
class OutputDef:
    """A value a module exposes to other modules."""

    value: Any = None
    description: str = ""
    sensitive: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OutputDef:
        return cls(
            value=data.get("value"),
            description=data.get("description") or "",
            sensitive=bool(data.get("sensitive", False)),
        )


@dataclass
class ModuleConfig:
    """Environment-resolved configuration of a single module.

    ``resolved_variables[name] is None`` means the variable is required
    and neither the environment nor a default supplied a value.
    """

    name: str
    type: str | None = None
    variables: dict[str, VariableDef] = field(default_factory=dict)
    outputs: dict[str, OutputDef] = field(default_factory=dict)
    locals: dict[str, Any] = field(default_factory=dict)
    managed_resources: dict[str, dict[str, Any]] = field(default_factory=dict)
    data_resources: dict[str, dict[str, Any]] = field(default_factory=dict)
    resolved_variables: dict[str, Any] = field(default_factory=dict)

    @property
    def unresolved_variables(self) -> list[str]:
        """Names of required variables that resolved to None."""
        return [k for k, v in self.resolved_variables.items() if v is None]

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any] | None) -> ModuleConfig:
        """Build from the parser's wire format, tolerating missing keys."""
        data = data or {}
        variables = {
            k: v if isinstance(v, VariableDef) else VariableDef.from_dict(_as_dict(v))
            for k, v in _as_dict(data.get("variables")).items()
        }
        outputs = {
            k: v if isinstance(v, OutputDef) else OutputDef.from_dict(_as_dict(v))
            for k, v in _as_dict(data.get("outputs")).items()
        }
        return cls(
            name=data.get("name") or name,
            type=data.get("type"),
            variables=variables,
            outputs=outputs,
            locals=_as_dict(data.get("locals")),
            managed_resources={
                k: _as_dict(v)
                for k, v in _as_dict(_pick(data, "managedResources", "managed_resources")).items()
            },
            data_resources={
                k: _as_dict(v)
                for k, v in _as_dict(_pick(data, "dataResources", "data_resources")).items()
            },
            resolved_variables=_as_dict(_pick(data, "resolvedVariables", "resolved_variables")),
        )


@dataclass
class EnvironmentConfig:
    """All modules of one repository resolved for one environment."""

    environment: str = "prod"
    variables: dict[str, Any] = field(default_factory=dict)
    backend_config: dict[str, Any] = field(default_factory=dict)
    modules: dict[str, ModuleConfig] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EnvironmentConfig:
        """Build from the parser's wire format.

        Raises:
            InvalidInputError: If ``modules`` is present but not a mapping.
        """
        raw_modules = data.get("modules")
        if raw_modules is None:
            raw_modules = {}
        if not isinstance(raw_modules, Mapping):
            raise InvalidInputError("modules", "expected a mapping of module name to config")

        modules: dict[str, ModuleConfig] = {}
        for name, module_data in raw_modules.items():
            if isinstance(module_data, ModuleConfig):
                modules[name] = module_data
            else:
                modules[name] = ModuleConfig.from_dict(name, _as_dict(module_data))

        return cls(
            environment=data.get("environment") or "prod",
            variables=_as_dict(data.get("variables")),
            backend_config=_as_dict(_pick(data, "backendConfig", "backend_config")),
            modules=modules,
        )


@dataclass
class Application:
    """An independently deployed application and its parsed resources.

    ``resources`` keeps the parser layout: ``{"resource": {type: {name:
    config}}}`` where ``config`` may also be a list of blocks.
    """

    id: str
    name: str
    resources: dict[str, Any] = field(default_factory=dict)

    @property
    def resource_blocks(self) -> dict[str, dict[str, Any]]:
        return _as_dict(self.resources.get("resource"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Application:
        """Build from the wire format.

        Raises:
            InvalidInputError: If the application has no name.
        """
        name = data.get("name")
        if not name:
            raise InvalidInputError("application.name", "every application needs a name")
        return cls(
            id=str(data.get("id") or name),
            name=str(name),
            resources=_as_dict(data.get("resources")),
        )
