# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from starpack import capability
from starpack.capability import COLLECTION_CONTEXT_ATTRS, get_context_attr, is_context_attr, set_context_attr
from starpack.errors import PreconditionViolation, StarpackError
from starpack.policy import PackagingPolicy, apply_policy
from starpack.resources import FileData, ModuleSource
from starpack.values import PythonSourceModuleValue


def _module_value() -> PythonSourceModuleValue:
	m = PythonSourceModuleValue(ModuleSource(name="foo", source=FileData.from_text("")))
	apply_policy(m, PackagingPolicy())
	return m


def test_context_attr_names_are_closed() -> None:
	assert COLLECTION_CONTEXT_ATTRS == (
		"add_include",
		"add_location",
		"add_location_fallback",
		"add_source",
		"add_bytecode_optimization_level_zero",
		"add_bytecode_optimization_level_one",
		"add_bytecode_optimization_level_two",
	)
	assert is_context_attr("add_include")
	assert not is_context_attr("name")


def test_routing_a_non_context_attr_is_a_precondition_violation() -> None:
	m = _module_value()
	with pytest.raises(PreconditionViolation):
		get_context_attr(m, "name")
	with pytest.raises(PreconditionViolation):
		set_context_attr(m, "name", "x")
	assert not issubclass(PreconditionViolation, StarpackError)


def test_capability_is_not_a_base_class() -> None:
	assert not any(base.__module__ == capability.__name__ for base in PythonSourceModuleValue.__mro__)


def test_context_is_not_removed_by_writes() -> None:
	m = _module_value()
	for attr in COLLECTION_CONTEXT_ATTRS:
		if attr == "add_location":
			continue
		m.set_attr(attr, None)
		assert m.add_context is not None
	assert m.get_attr("add_location") == "in-memory"
	assert m.get_attr("add_location_fallback") is None
