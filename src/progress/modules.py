"""
Module graph for a course.

Modules hold lessons and list the modules that must be completed before
they unlock. The classic course is a straight chain (module N+1 needs
module N); `ModuleGraph.sequential` builds that. Arbitrary prerequisite
DAGs are accepted too, validated for unknown references and cycles.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from src.core.errors import ModuleGraphError


@dataclass(frozen=True)
class ModuleDefinition:
    """One course module and its prerequisite modules."""

    module_id: str
    title: str = ""
    lesson_ids: tuple[str, ...] = field(default_factory=tuple)
    prerequisites: tuple[str, ...] = field(default_factory=tuple)


class ModuleGraph:
    """
    Validated module dependency graph.

    Module order is the order modules were given in; it is used for
    display and as the chain order of `sequential`.
    """

    def __init__(self, modules: Iterable[ModuleDefinition], foundation_id: str | None = None):
        """
        Build and validate a graph.

        Args:
            modules: Module definitions
            foundation_id: Module that is always unlocked, whatever its prerequisites

        Raises:
            ModuleGraphError: duplicate module or lesson ids, unknown
                prerequisite or foundation, or a dependency cycle
        """
        self._modules: dict[str, ModuleDefinition] = {}
        for module in modules:
            if module.module_id in self._modules:
                raise ModuleGraphError(f"Duplicate module id: {module.module_id}")
            self._modules[module.module_id] = module

        if foundation_id is not None and foundation_id not in self._modules:
            raise ModuleGraphError(f"Unknown foundation module: {foundation_id}")
        self.foundation_id = foundation_id

        self._lesson_module: dict[str, str] = {}
        for module in self._modules.values():
            for lesson_id in module.lesson_ids:
                previous = self._lesson_module.get(lesson_id)
                if previous is not None:
                    raise ModuleGraphError(
                        f"Lesson {lesson_id} appears in both {previous} and {module.module_id}"
                    )
                self._lesson_module[lesson_id] = module.module_id

        _validate_dependencies(self._modules)

    @classmethod
    def sequential(
        cls,
        modules: Iterable[ModuleDefinition],
        foundation_id: str | None = None,
    ) -> ModuleGraph:
        """
        Chain modules in the given order: each one requires the one before it.

        Prerequisites already on the definitions are replaced. The first
        module is the foundation unless another is named.
        """
        chained: list[ModuleDefinition] = []
        previous: str | None = None
        for module in modules:
            chained.append(
                ModuleDefinition(
                    module_id=module.module_id,
                    title=module.title,
                    lesson_ids=tuple(module.lesson_ids),
                    prerequisites=(previous,) if previous is not None else (),
                )
            )
            previous = module.module_id

        if foundation_id is None and chained:
            foundation_id = chained[0].module_id
        return cls(chained, foundation_id=foundation_id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], foundation_id: str | None = None) -> ModuleGraph:
        """
        Build a graph from a course document.

        Expected shape::

            {"sequential": true, "foundation": "m1",
             "modules": [{"id": "m1", "title": "...", "lessons": ["l1", "l2"],
                          "prerequisites": []}, ...]}

        With `sequential` true (the default) prerequisites are ignored and
        the modules are chained in list order.
        """
        raw_modules = data.get("modules")
        if not isinstance(raw_modules, list):
            raise ModuleGraphError("Course document needs a 'modules' list")

        modules: list[ModuleDefinition] = []
        for item in raw_modules:
            if not isinstance(item, Mapping) or not item.get("id"):
                raise ModuleGraphError(f"Module entry needs an 'id': {item!r}")
            modules.append(
                ModuleDefinition(
                    module_id=str(item["id"]),
                    title=str(item.get("title", "")),
                    lesson_ids=tuple(str(lesson) for lesson in item.get("lessons", ())),
                    prerequisites=tuple(str(p) for p in item.get("prerequisites", ())),
                )
            )

        foundation_id = foundation_id or data.get("foundation")
        if data.get("sequential", True):
            return cls.sequential(modules, foundation_id=foundation_id)
        return cls(modules, foundation_id=foundation_id)

    @property
    def modules(self) -> list[ModuleDefinition]:
        return list(self._modules.values())

    @property
    def lesson_ids(self) -> list[str]:
        """Every lesson across every module, in module order."""
        return list(self._lesson_module)

    def get(self, module_id: str) -> ModuleDefinition:
        try:
            return self._modules[module_id]
        except KeyError:
            raise ModuleGraphError(f"Unknown module: {module_id}") from None

    def module_of(self, lesson_id: str) -> str | None:
        return self._lesson_module.get(lesson_id)

    def dependents(self, module_id: str) -> list[str]:
        """Modules that list `module_id` as a prerequisite."""
        return [m.module_id for m in self._modules.values() if module_id in m.prerequisites]

    def is_unlocked(self, module_id: str, completed_modules: Collection[str]) -> bool:
        """
        Unlock rule: the foundation module and modules without prerequisites
        are always open; any other module opens once every prerequisite
        module is complete.
        """
        module = self.get(module_id)
        if module_id == self.foundation_id or not module.prerequisites:
            return True
        return all(p in completed_modules for p in module.prerequisites)

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules


def _validate_dependencies(modules: dict[str, ModuleDefinition]) -> None:
    """Validate prerequisites exist and the dependency graph has no cycles."""
    for module in modules.values():
        for prerequisite in module.prerequisites:
            if prerequisite not in modules:
                raise ModuleGraphError(
                    f"Module '{module.module_id}' has unknown prerequisite '{prerequisite}'"
                )

    visiting: set[str] = set()
    visited: set[str] = set()

    def visit(module_id: str, path: list[str]) -> None:
        if module_id in visited:
            return
        if module_id in visiting:
            cycle_path = path[path.index(module_id):] + [module_id]
            raise ModuleGraphError(f"Circular module dependency: {' -> '.join(cycle_path)}")

        visiting.add(module_id)
        path.append(module_id)
        for prerequisite in modules[module_id].prerequisites:
            visit(prerequisite, path)
        path.pop()
        visiting.remove(module_id)
        visited.add(module_id)

    for module_id in modules:
        visit(module_id, [])
