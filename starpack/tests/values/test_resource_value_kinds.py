# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from starpack.adapter import resource_to_value
from starpack.capability import COLLECTION_CONTEXT_ATTRS
from starpack.errors import MissingContextError, UnsupportedAttributeError
from starpack.policy import PackagingPolicy
from starpack.resources import ExtensionModule, FileData, PackageDistributionResource, PackageResource
from starpack.values import (
	PythonExtensionModuleValue,
	PythonPackageDistributionResourceValue,
	PythonPackageResourceValue,
)


def _package_resource() -> PythonPackageResourceValue:
	r = resource_to_value(
		PackageResource(leaf_package="foo.bar", relative_name="data/x.txt", data=FileData(data=b"x")),
		PackagingPolicy(),
	)
	assert isinstance(r, PythonPackageResourceValue)
	return r


def _distribution_resource() -> PythonPackageDistributionResourceValue:
	r = resource_to_value(
		PackageDistributionResource(package="foo", version="1.0", name="METADATA", data=FileData(data=b"")),
		PackagingPolicy(),
	)
	assert isinstance(r, PythonPackageDistributionResourceValue)
	return r


def test_package_resource_attrs() -> None:
	r = _package_resource()
	assert r.type_name() == "PythonPackageResource"
	assert str(r) == "PythonPackageResource<package=foo.bar, name=data/x.txt>"
	assert r.get_attr("package") == "foo.bar"
	assert r.get_attr("name") == "data/x.txt"
	assert r.get_attr("add_include") is True
	assert r.get_attr("add_location") == "in-memory"
	assert r.get_attr("add_source") is False
	assert not r.has_attr("source")
	assert not r.has_attr("is_package")


def test_distribution_resource_attrs() -> None:
	r = _distribution_resource()
	assert r.type_name() == "PythonPackageDistributionResource"
	assert r.to_repr() == "PythonPackageDistributionResource<package=foo, name=METADATA>"
	assert r.get_attr("package") == "foo"
	assert r.get_attr("name") == "METADATA"
	assert r.to_bool() is True
	assert bool(r) is True


def test_distribution_resource_is_truthy_without_context() -> None:
	r = PythonPackageDistributionResourceValue(
		PackageDistributionResource(package="foo", version="1.0", name="RECORD", data=FileData(data=b""))
	)
	assert r.add_context is None
	assert bool(r)


@pytest.mark.parametrize("factory", [_package_resource, _distribution_resource])
def test_context_attrs_writable_on_all_context_kinds(factory) -> None:
	r = factory()
	for attr in COLLECTION_CONTEXT_ATTRS:
		assert r.has_attr(attr)
	r.set_attr("add_include", False)
	assert r.get_attr("add_include") is False
	r.set_attr("add_location", "filesystem-relative:share")
	assert r.get_attr("add_location") == "filesystem-relative:share"
	r.set_attr("add_location_fallback", "in-memory")
	assert r.get_attr("add_location_fallback") == "in-memory"


@pytest.mark.parametrize("factory", [_package_resource, _distribution_resource])
def test_intrinsic_attrs_read_only_on_resources(factory) -> None:
	r = factory()
	with pytest.raises(UnsupportedAttributeError, match="cannot set attribute 'package'"):
		r.set_attr("package", "other")


def test_distribution_resource_set_add_include() -> None:
	r = _distribution_resource()
	assert r.has_attr("add_include")
	r.set_attr("add_include", True)
	assert r.get_attr("add_include") is True


@pytest.mark.parametrize(
	"value",
	[
		PythonPackageResourceValue(PackageResource(leaf_package="p", relative_name="n", data=FileData(data=b""))),
		PythonPackageDistributionResourceValue(
			PackageDistributionResource(package="p", version="1", name="n", data=FileData(data=b""))
		),
	],
)
def test_missing_context_reads_none_and_rejects_writes(value) -> None:
	assert value.add_context is None
	for attr in COLLECTION_CONTEXT_ATTRS:
		assert value.has_attr(attr)
		assert value.get_attr(attr) is None
	with pytest.raises(MissingContextError, match="no collection context to configure") as excinfo:
		value.set_attr("add_location", "in-memory")
	assert excinfo.value.attribute == "add_location"
	assert excinfo.value.type_name == value.TYPE
	assert value.add_context is None


def test_extension_module_has_no_context_surface() -> None:
	e = resource_to_value(ExtensionModule(name="_ssl"), PackagingPolicy())
	assert isinstance(e, PythonExtensionModuleValue)
	assert e.type_name() == "PythonExtensionModule"
	assert e.to_str() == "PythonExtensionModule<name=_ssl>"
	assert not hasattr(e, "add_context")
	assert e.has_attr("name")
	assert e.get_attr("name") == "_ssl"
	assert e.attr_names() == ["name"]
	for attr in COLLECTION_CONTEXT_ATTRS:
		assert not e.has_attr(attr)
		with pytest.raises(UnsupportedAttributeError, match="on PythonExtensionModule"):
			e.get_attr(attr)
		with pytest.raises(UnsupportedAttributeError):
			e.set_attr(attr, True)


def test_to_dict_snapshots() -> None:
	r = _package_resource()
	assert r.to_dict() == {
		"type": "PythonPackageResource",
		"package": "foo.bar",
		"name": "data/x.txt",
		"add_include": True,
		"add_location": "in-memory",
		"add_location_fallback": None,
		"add_source": False,
		"add_bytecode_optimization_level_zero": False,
		"add_bytecode_optimization_level_one": False,
		"add_bytecode_optimization_level_two": False,
	}
	e = resource_to_value(ExtensionModule(name="_ssl"), PackagingPolicy())
	assert e.to_dict() == {"type": "PythonExtensionModule", "name": "_ssl"}
