"""Environment resolution: turns parsed module files into ModuleConfigs.

Works on already-parsed data only. HCL documents arrive as the dicts an
hcl2json-style converter produces; ``.tfvars`` and backend files arrive
as text. Nothing here touches the filesystem or the network.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping

from infragraph.models.module import (
    MISSING,
    EnvironmentConfig,
    ModuleConfig,
    OutputDef,
    VariableDef,
)

logger = logging.getLogger(__name__)

TFVARS_LINE = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)\s*=\s*(.+)$")
QUOTED_VALUE = re.compile(r'^"((?:[^"\\]|\\.)*)"\s*(?:(?:#|//).*)?$')
TRAILING_COMMENT = re.compile(r"\s*(?:#|//).*$")
NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# Parsed documents a module may provide, keyed by role
MODULE_FILE_ROLES: tuple[str, ...] = ("variables", "outputs", "locals", "data", "main")


def parse_variable_value(raw: str) -> Any:
    """Parse a single tfvars value.

    Handles quoted strings, booleans, numbers and simple JSON-like lists
    and maps. Anything else is returned as the stripped text.
    """
    value = raw.strip()
    quoted = QUOTED_VALUE.match(value)
    if quoted:
        return quoted.group(1)

    value = TRAILING_COMMENT.sub("", value)
    if value in ("true", "false"):
        return value == "true"
    if NUMBER.match(value):
        if re.fullmatch(r"[+-]?\d+", value):
            return int(value)
        return float(value)
    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value.replace("'", '"'))
        except ValueError:
            return value
    return value


def parse_tfvars(content: str) -> dict[str, Any]:
    """Parse ``key = value`` lines of a tfvars file.

    Blank lines and ``#`` / ``//`` comment lines are skipped; lines that
    are not simple assignments are ignored.
    """
    variables: dict[str, Any] = {}
    if not content:
        return variables

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or stripped.startswith("//"):
            continue
        match = TFVARS_LINE.match(stripped)
        if match:
            variables[match.group(1)] = parse_variable_value(match.group(2))
    return variables


def parse_backend_config(content: str) -> dict[str, str]:
    """Parse a backend config file into string settings."""
    config: dict[str, str] = {}
    if not content:
        return config

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, _, value = stripped.partition("=")
        if key.strip():
            config[key.strip()] = value.strip().replace('"', "")
    return config


def _section(parsed: Mapping[str, Any] | None, key: str) -> Any:
    if not isinstance(parsed, Mapping):
        return None
    return parsed.get(key)


def _first_block(value: Any) -> dict[str, Any]:
    # hcl2json wraps each block body in a single-element list
    if isinstance(value, list):
        value = value[0] if value else {}
    return value if isinstance(value, dict) else {}


def extract_variable_definitions(parsed: Mapping[str, Any] | None) -> dict[str, VariableDef]:
    section = _section(parsed, "variable")
    if not isinstance(section, Mapping):
        return {}
    return {name: VariableDef.from_dict(_first_block(body)) for name, body in section.items()}


def extract_output_definitions(parsed: Mapping[str, Any] | None) -> dict[str, OutputDef]:
    section = _section(parsed, "output")
    if not isinstance(section, Mapping):
        return {}
    return {name: OutputDef.from_dict(_first_block(body)) for name, body in section.items()}


def extract_locals(parsed: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge every ``locals`` block; later blocks win on name clashes."""
    section = _section(parsed, "locals")
    blocks = section if isinstance(section, list) else [section]
    merged: dict[str, Any] = {}
    for block in blocks:
        if isinstance(block, Mapping):
            merged.update(block)
    return merged


def _extract_blocks(parsed: Mapping[str, Any] | None, key: str) -> dict[str, dict[str, Any]]:
    section = _section(parsed, key)
    if not isinstance(section, Mapping):
        return {}
    return {
        block_type: dict(instances)
        for block_type, instances in section.items()
        if isinstance(instances, Mapping)
    }


def extract_data_resources(parsed: Mapping[str, Any] | None) -> dict[str, dict[str, Any]]:
    return _extract_blocks(parsed, "data")


def extract_managed_resources(parsed: Mapping[str, Any] | None) -> dict[str, dict[str, Any]]:
    return _extract_blocks(parsed, "resource")


def resolve_module_variables(
    variables: Mapping[str, VariableDef],
    env_vars: Mapping[str, Any],
    module_name: str,
) -> dict[str, Any]:
    """Resolve each declared variable against the environment.

    Precedence: ``<module>_<var>`` override, then ``<var>``, then the
    declared default. A variable with none of these resolves to None.
    """
    resolved: dict[str, Any] = {}
    for name, definition in variables.items():
        scoped = f"{module_name}_{name}"
        if scoped in env_vars:
            resolved[name] = env_vars[scoped]
        elif name in env_vars:
            resolved[name] = env_vars[name]
        elif definition.default is not MISSING:
            resolved[name] = definition.default
        else:
            resolved[name] = None
    return resolved


def build_module_config(
    name: str,
    module_type: str | None,
    parsed: Mapping[str, Mapping[str, Any] | None],
    env_vars: Mapping[str, Any] | None = None,
) -> ModuleConfig:
    """Build one module from its parsed files.

    Args:
        name: Module name.
        module_type: Module classification from the repository scan.
        parsed: Parsed documents keyed by role (see MODULE_FILE_ROLES).
            Missing roles are treated as empty.
        env_vars: Environment-level variable values.

    Returns:
        ModuleConfig with resolved variables. A module whose documents
        cannot be interpreted degrades to an empty module.
    """
    try:
        variables = extract_variable_definitions(parsed.get("variables"))
        config = ModuleConfig(
            name=name,
            type=module_type,
            variables=variables,
            outputs=extract_output_definitions(parsed.get("outputs")),
            locals=extract_locals(parsed.get("locals")),
            data_resources=extract_data_resources(parsed.get("data")),
            managed_resources=extract_managed_resources(parsed.get("main")),
        )
    except (TypeError, ValueError, AttributeError) as exc:
        logger.warning("module_config_degraded module=%s error=%s", name, exc)
        return ModuleConfig(name=name, type=module_type)

    config.resolved_variables = resolve_module_variables(variables, env_vars or {}, name)
    return config


def build_environment_config(
    environment: str,
    modules: Mapping[str, Mapping[str, Any]],
    tfvars_text: str = "",
    backend_text: str = "",
) -> EnvironmentConfig:
    """Assemble an EnvironmentConfig from parsed module files.

    Args:
        environment: Environment name, e.g. "prod".
        modules: Module name to ``{"type": ..., "files": {role: parsed}}``.
        tfvars_text: Contents of the environment's tfvars file.
        backend_text: Contents of the environment's backend config.

    Returns:
        EnvironmentConfig ready for dependency resolution.
    """
    env_vars = parse_tfvars(tfvars_text)
    config = EnvironmentConfig(
        environment=environment,
        variables=env_vars,
        backend_config=parse_backend_config(backend_text),
    )
    for name, entry in modules.items():
        files = entry.get("files") or {}
        config.modules[name] = build_module_config(name, entry.get("type"), files, env_vars)

    logger.debug(
        "environment_config_built environment=%s modules=%d variables=%d",
        environment,
        len(config.modules),
        len(env_vars),
    )
    return config
