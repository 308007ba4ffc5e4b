"""Module index: name-keyed lookup over environment-resolved modules.

Every collection on an indexed module is a dict, never None, so the
scanning passes can iterate without guards.
"""

from __future__ import annotations

from typing import Iterator, Mapping

from infragraph.models.module import ModuleConfig
from infragraph.models.result import ModuleSummary


def _count_instances(blocks: Mapping[str, Mapping[str, object]]) -> int:
    return sum(len(instances) for instances in blocks.values())


class ModuleIndex:
    """Queryable map of module metadata for one resolution run.

    Iteration order is the insertion order of the input modules and
    determines which module wins in ``find_module_with_resource``.
    """

    def __init__(self) -> None:
        self._modules: dict[str, ModuleConfig] = {}

    @classmethod
    def from_modules(cls, modules: Mapping[str, ModuleConfig | Mapping]) -> ModuleIndex:
        """Index all modules.

        Args:
            modules: Module name to ModuleConfig (or its wire dict).

        Returns:
            A populated index.
        """
        index = cls()
        for name, config in modules.items():
            if not isinstance(config, ModuleConfig):
                config = ModuleConfig.from_dict(name, config)
            index._modules[name] = ModuleConfig(
                name=name,
                type=config.type,
                variables=dict(config.variables or {}),
                outputs=dict(config.outputs or {}),
                locals=dict(config.locals or {}),
                managed_resources={k: dict(v or {}) for k, v in (config.managed_resources or {}).items()},
                data_resources={k: dict(v or {}) for k, v in (config.data_resources or {}).items()},
                resolved_variables=dict(config.resolved_variables or {}),
            )
        return index

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def get(self, name: str) -> ModuleConfig | None:
        return self._modules.get(name)

    def items(self) -> Iterator[tuple[str, ModuleConfig]]:
        return iter(self._modules.items())

    @property
    def names(self) -> list[str]:
        return list(self._modules)

    def find_module_with_resource(
        self,
        resource_type: str,
        resource_name: str | None = None,
    ) -> str | None:
        """Find the first module that manages a resource.

        First match wins: if several modules define the same resource,
        the earliest indexed one is returned.

        Args:
            resource_type: Resource type, or ``type.name`` when
                ``resource_name`` is omitted.
            resource_name: Instance name. If omitted and ``resource_type``
                has no ``type.name`` shape, any instance of the type matches.

        Returns:
            The owning module name, or None.
        """
        if resource_name is None:
            parts = resource_type.split(".")
            if len(parts) == 2:
                resource_type, resource_name = parts

        for module_name, module in self._modules.items():
            instances = module.managed_resources.get(resource_type)
            if instances is None:
                continue
            if resource_name is None or resource_name in instances:
                return module_name
        return None

    def summary(self) -> dict[str, ModuleSummary]:
        """Per-module size counts for the analysis result."""
        return {
            name: ModuleSummary(
                type=module.type,
                outputs_count=len(module.outputs),
                variables_count=len(module.variables),
                resources_count=_count_instances(module.managed_resources),
                data_sources_count=_count_instances(module.data_resources),
            )
            for name, module in self._modules.items()
        }
