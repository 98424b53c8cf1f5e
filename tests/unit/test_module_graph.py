"""
Tests for ModuleGraph construction, validation and unlock rules.
"""

import pytest

from src.core.errors import InputError, ModuleGraphError
from src.progress.modules import ModuleDefinition, ModuleGraph


def _modules():
    return [
        ModuleDefinition("m1", "Aircraft General", ("l1", "l2")),
        ModuleDefinition("m2", "Electrical", ("l3",)),
        ModuleDefinition("m3", "Hydraulics", ("l4", "l5")),
    ]


class TestSequential:
    """The classic chained course."""

    def test_chain_prerequisites(self):
        graph = ModuleGraph.sequential(_modules())

        assert graph.get("m1").prerequisites == ()
        assert graph.get("m2").prerequisites == ("m1",)
        assert graph.get("m3").prerequisites == ("m2",)
        assert graph.foundation_id == "m1"

    def test_existing_prerequisites_replaced(self):
        modules = [ModuleDefinition("a", prerequisites=("b",)), ModuleDefinition("b")]
        graph = ModuleGraph.sequential(modules)

        assert graph.get("a").prerequisites == ()
        assert graph.get("b").prerequisites == ("a",)

    def test_named_foundation(self):
        graph = ModuleGraph.sequential(_modules(), foundation_id="m2")

        assert graph.is_unlocked("m2", completed_modules=set())
        assert not graph.is_unlocked("m3", completed_modules=set())

    def test_unlock_chain(self):
        graph = ModuleGraph.sequential(_modules())

        assert graph.is_unlocked("m1", set())
        assert not graph.is_unlocked("m2", set())
        assert graph.is_unlocked("m2", {"m1"})
        assert not graph.is_unlocked("m3", {"m1"})

    def test_lesson_lookup(self):
        graph = ModuleGraph.sequential(_modules())

        assert graph.module_of("l4") == "m3"
        assert graph.module_of("unknown") is None
        assert graph.lesson_ids == ["l1", "l2", "l3", "l4", "l5"]
        assert graph.dependents("m1") == ["m2"]
        assert len(graph) == 3
        assert "m2" in graph


class TestDag:
    """Arbitrary prerequisite graphs."""

    def test_multiple_prerequisites(self):
        graph = ModuleGraph(
            [
                ModuleDefinition("a"),
                ModuleDefinition("b"),
                ModuleDefinition("c", prerequisites=("a", "b")),
            ]
        )

        assert graph.is_unlocked("a", set())
        assert graph.is_unlocked("b", set())
        assert not graph.is_unlocked("c", {"a"})
        assert graph.is_unlocked("c", {"a", "b"})

    def test_cycle_detected(self):
        with pytest.raises(ModuleGraphError, match="a -> b -> c -> a"):
            ModuleGraph(
                [
                    ModuleDefinition("a", prerequisites=("b",)),
                    ModuleDefinition("b", prerequisites=("c",)),
                    ModuleDefinition("c", prerequisites=("a",)),
                ]
            )

    def test_self_dependency_is_a_cycle(self):
        with pytest.raises(ModuleGraphError, match="Circular"):
            ModuleGraph([ModuleDefinition("a", prerequisites=("a",))])

    def test_unknown_prerequisite(self):
        with pytest.raises(ModuleGraphError, match="unknown prerequisite 'zz'"):
            ModuleGraph([ModuleDefinition("a", prerequisites=("zz",))])

    def test_duplicate_module(self):
        with pytest.raises(ModuleGraphError, match="Duplicate module"):
            ModuleGraph([ModuleDefinition("a"), ModuleDefinition("a")])

    def test_lesson_in_two_modules(self):
        with pytest.raises(ModuleGraphError, match="appears in both"):
            ModuleGraph([ModuleDefinition("a", lesson_ids=("l1",)), ModuleDefinition("b", lesson_ids=("l1",))])

    def test_unknown_foundation(self):
        with pytest.raises(ModuleGraphError):
            ModuleGraph([ModuleDefinition("a")], foundation_id="b")

    def test_unknown_module_lookup(self):
        graph = ModuleGraph([ModuleDefinition("a")])
        with pytest.raises(ModuleGraphError):
            graph.get("b")

    def test_graph_error_is_input_error(self):
        assert issubclass(ModuleGraphError, InputError)


class TestFromDict:
    """Course documents."""

    def test_sequential_by_default(self):
        graph = ModuleGraph.from_dict(
            {
                "modules": [
                    {"id": "m1", "title": "One", "lessons": ["l1"]},
                    {"id": "m2", "title": "Two", "lessons": ["l2"]},
                ]
            }
        )

        assert graph.get("m2").prerequisites == ("m1",)
        assert graph.get("m1").title == "One"

    def test_explicit_prerequisites(self):
        graph = ModuleGraph.from_dict(
            {
                "sequential": False,
                "foundation": "m2",
                "modules": [
                    {"id": "m1", "lessons": ["l1"], "prerequisites": ["m2"]},
                    {"id": "m2", "lessons": ["l2"]},
                ],
            }
        )

        assert graph.get("m1").prerequisites == ("m2",)
        assert graph.foundation_id == "m2"

    @pytest.mark.parametrize("data", [{}, {"modules": "m1"}, {"modules": [{"title": "no id"}]}])
    def test_malformed(self, data):
        with pytest.raises(ModuleGraphError):
            ModuleGraph.from_dict(data)
