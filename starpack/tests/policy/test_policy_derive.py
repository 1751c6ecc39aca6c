# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from starpack.context import CollectionContext
from starpack.errors import PolicyConfigError
from starpack.location import FilesystemRelative, InMemory
from starpack.policy import PackagingPolicy, apply_policy, derive_context
from starpack.resources import (
	ExtensionModule,
	FileData,
	ModuleSource,
	PackageDistributionResource,
	PackageResource,
)
from starpack.values import PythonSourceModuleValue


def _module(name: str = "foo", **kwargs) -> ModuleSource:
	return ModuleSource(name=name, source=FileData.from_text("import bar"), **kwargs)


def test_default_policy_source_module_context() -> None:
	ctx = derive_context(_module(), PackagingPolicy())
	assert ctx == CollectionContext(
		include=True,
		location=InMemory(),
		location_fallback=None,
		store_source=True,
		optimize_level_zero=True,
		optimize_level_one=False,
		optimize_level_two=False,
	)


def test_non_source_kinds_never_store_source_or_bytecode() -> None:
	policy = PackagingPolicy(bytecode_optimize_level_one=True)
	for resource in (
		PackageResource(leaf_package="foo", relative_name="data.txt", data=FileData(data=b"x")),
		PackageDistributionResource(package="foo", version="1.0", name="METADATA", data=FileData(data=b"")),
	):
		ctx = policy.derive_context(resource)
		assert ctx.include is True
		assert ctx.store_source is False
		assert (ctx.optimize_level_zero, ctx.optimize_level_one, ctx.optimize_level_two) == (False, False, False)


def test_test_modules_excluded_unless_requested() -> None:
	test_mod = _module("foo.tests.test_x", is_test=True)
	assert PackagingPolicy().derive_context(test_mod).include is False
	assert PackagingPolicy(include_test=True).derive_context(test_mod).include is True


def test_stdlib_sources_follow_distribution_flags() -> None:
	policy = PackagingPolicy(include_distribution_sources=False)
	ctx = policy.derive_context(_module("json", is_stdlib=True))
	assert ctx.include is False
	assert ctx.store_source is False
	assert policy.derive_context(_module("app")).include is True


def test_stdlib_package_resources_follow_distribution_resources_flag() -> None:
	resource = PackageResource(leaf_package="json", relative_name="x.txt", data=FileData(data=b""), is_stdlib=True)
	assert PackagingPolicy().filter_resource(resource) is False
	assert PackagingPolicy(include_distribution_resources=True).filter_resource(resource) is True


def test_derived_location_is_always_concrete() -> None:
	policy = PackagingPolicy()
	policy.set_resource_handling_mode("prefer-in-memory-fallback-filesystem-relative:lib")
	ctx = policy.derive_context(_module())
	assert ctx.location == InMemory()
	assert ctx.location_fallback == FilesystemRelative(prefix="lib")


@pytest.mark.parametrize(
	"mode, location, fallback",
	[
		("in-memory-only", InMemory(), None),
		("filesystem-relative-only:prefix", FilesystemRelative(prefix="prefix"), None),
		("prefer-in-memory-fallback-filesystem-relative:", InMemory(), FilesystemRelative(prefix="")),
	],
)
def test_resource_handling_modes(mode: str, location, fallback) -> None:
	policy = PackagingPolicy(resources_location_fallback=FilesystemRelative(prefix="old"))
	policy.set_resource_handling_mode(mode)
	assert policy.resources_location == location
	assert policy.resources_location_fallback == fallback


def test_unknown_resource_handling_mode_rejected() -> None:
	with pytest.raises(PolicyConfigError, match="unknown resource handling mode 'classify'"):
		PackagingPolicy().set_resource_handling_mode("classify")


def test_apply_policy_replaces_existing_context() -> None:
	m = PythonSourceModuleValue(_module())
	m.add_context = CollectionContext(include=False, location=FilesystemRelative(prefix="x"))
	apply_policy(m, PackagingPolicy())
	assert m.add_context is not None
	assert m.add_context.include is True
	assert m.add_context.location == InMemory()


def test_each_application_yields_a_fresh_context() -> None:
	policy = PackagingPolicy()
	a = PythonSourceModuleValue(_module("a"))
	b = PythonSourceModuleValue(_module("b"))
	apply_policy(a, policy)
	apply_policy(b, policy)
	assert a.add_context is not b.add_context
	a.set_attr("add_include", False)
	assert b.get_attr("add_include") is True


def test_context_rejects_default_location() -> None:
	from starpack.location import DefaultLocation

	with pytest.raises(ValueError, match="must be concrete"):
		CollectionContext(location=DefaultLocation())  # type: ignore[arg-type]


def test_extension_modules_are_always_included() -> None:
	assert PackagingPolicy().filter_resource(ExtensionModule(name="_ssl")) is True
