# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Configuration-language values wrapping Python resources.

Each kind declares its intrinsic (read-only) attributes in an explicit table.
Context-bearing kinds additionally delegate the `add_*` names to
`starpack.capability`; the extension module kind carries no context and does
not.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from starpack import capability
from starpack.capability import COLLECTION_CONTEXT_ATTRS
from starpack.context import CollectionContext
from starpack.errors import SourceResolutionError, TextDecodingError, unsupported_attribute
from starpack.resources import ExtensionModule, ModuleSource, PackageDistributionResource, PackageResource

Getter = Callable[[Any], object]


def _dispatch_get(value: Any, intrinsic: Dict[str, Getter], attribute: str, *, with_context: bool) -> object:
	getter = intrinsic.get(attribute)
	if getter is not None:
		return getter(value)
	if with_context and capability.is_context_attr(attribute):
		return capability.get_context_attr(value, attribute)
	raise unsupported_attribute(value.TYPE, attribute, operation="getattr", expected=value.attr_names())


def _dispatch_set(value: Any, attribute: str, new_value: object, *, with_context: bool) -> None:
	# Intrinsic attributes are read-only.
	if with_context and capability.is_context_attr(attribute):
		capability.set_context_attr(value, attribute, new_value)
		return
	expected = list(COLLECTION_CONTEXT_ATTRS) if with_context else []
	raise unsupported_attribute(value.TYPE, attribute, operation="setattr", expected=expected)


def _context_snapshot(value: Any) -> Dict[str, object]:
	return {name: capability.get_context_attr(value, name) for name in COLLECTION_CONTEXT_ATTRS}


def _resolve_source(value: "PythonSourceModuleValue") -> str:
	try:
		raw = value.inner.source.resolve()
	except OSError as err:
		raise SourceResolutionError(
			reason_code="source-resolution",
			message=f"error resolving source code: {err}",
			label="source",
			type_name=value.TYPE,
			attribute="source",
		) from err
	try:
		return raw.decode("utf-8")
	except UnicodeDecodeError as err:
		raise TextDecodingError(
			reason_code="source-decode",
			message="error converting source code to UTF-8",
			label="source",
			type_name=value.TYPE,
			attribute="source",
		) from err


class PythonSourceModuleValue:
	TYPE = "PythonSourceModule"

	_INTRINSIC: Dict[str, Getter] = {
		"name": lambda v: v.inner.name,
		"source": _resolve_source,
		"is_package": lambda v: v.inner.is_package,
	}

	def __init__(self, module: ModuleSource) -> None:
		self.inner = module
		self.add_context: Optional[CollectionContext] = None

	def as_resource(self) -> ModuleSource:
		return self.inner

	def type_name(self) -> str:
		return self.TYPE

	def to_str(self) -> str:
		return f"{self.TYPE}<name={self.inner.name}>"

	def to_repr(self) -> str:
		return self.to_str()

	def to_bool(self) -> bool:
		return True

	def attr_names(self) -> list[str]:
		return [*self._INTRINSIC, *COLLECTION_CONTEXT_ATTRS]

	def has_attr(self, attribute: str) -> bool:
		return attribute in self._INTRINSIC or capability.is_context_attr(attribute)

	def get_attr(self, attribute: str) -> object:
		return _dispatch_get(self, self._INTRINSIC, attribute, with_context=True)

	def set_attr(self, attribute: str, value: object) -> None:
		_dispatch_set(self, attribute, value, with_context=True)

	def to_dict(self) -> Dict[str, object]:
		return {
			"type": self.TYPE,
			"name": self.inner.name,
			"is_package": self.inner.is_package,
			**_context_snapshot(self),
		}

	def __str__(self) -> str:
		return self.to_str()

	def __repr__(self) -> str:
		return self.to_repr()


class PythonPackageResourceValue:
	TYPE = "PythonPackageResource"

	_INTRINSIC: Dict[str, Getter] = {
		"package": lambda v: v.inner.leaf_package,
		"name": lambda v: v.inner.relative_name,
	}

	def __init__(self, resource: PackageResource) -> None:
		self.inner = resource
		self.add_context: Optional[CollectionContext] = None

	def as_resource(self) -> PackageResource:
		return self.inner

	def type_name(self) -> str:
		return self.TYPE

	def to_str(self) -> str:
		return f"{self.TYPE}<package={self.inner.leaf_package}, name={self.inner.relative_name}>"

	def to_repr(self) -> str:
		return self.to_str()

	def to_bool(self) -> bool:
		return True

	def attr_names(self) -> list[str]:
		return [*self._INTRINSIC, *COLLECTION_CONTEXT_ATTRS]

	def has_attr(self, attribute: str) -> bool:
		return attribute in self._INTRINSIC or capability.is_context_attr(attribute)

	def get_attr(self, attribute: str) -> object:
		return _dispatch_get(self, self._INTRINSIC, attribute, with_context=True)

	def set_attr(self, attribute: str, value: object) -> None:
		_dispatch_set(self, attribute, value, with_context=True)

	def to_dict(self) -> Dict[str, object]:
		return {
			"type": self.TYPE,
			"package": self.inner.leaf_package,
			"name": self.inner.relative_name,
			**_context_snapshot(self),
		}

	def __str__(self) -> str:
		return self.to_str()

	def __repr__(self) -> str:
		return self.to_repr()


class PythonPackageDistributionResourceValue:
	TYPE = "PythonPackageDistributionResource"

	_INTRINSIC: Dict[str, Getter] = {
		"package": lambda v: v.inner.package,
		"name": lambda v: v.inner.name,
	}

	def __init__(self, resource: PackageDistributionResource) -> None:
		self.inner = resource
		self.add_context: Optional[CollectionContext] = None

	def as_resource(self) -> PackageDistributionResource:
		return self.inner

	def type_name(self) -> str:
		return self.TYPE

	def to_str(self) -> str:
		return f"{self.TYPE}<package={self.inner.package}, name={self.inner.name}>"

	def to_repr(self) -> str:
		return self.to_str()

	def to_bool(self) -> bool:
		# Always truthy, context or not.
		return True

	def attr_names(self) -> list[str]:
		return [*self._INTRINSIC, *COLLECTION_CONTEXT_ATTRS]

	def has_attr(self, attribute: str) -> bool:
		return attribute in self._INTRINSIC or capability.is_context_attr(attribute)

	def get_attr(self, attribute: str) -> object:
		return _dispatch_get(self, self._INTRINSIC, attribute, with_context=True)

	def set_attr(self, attribute: str, value: object) -> None:
		_dispatch_set(self, attribute, value, with_context=True)

	def to_dict(self) -> Dict[str, object]:
		return {
			"type": self.TYPE,
			"package": self.inner.package,
			"name": self.inner.name,
			**_context_snapshot(self),
		}

	def __bool__(self) -> bool:
		return self.to_bool()

	def __str__(self) -> str:
		return self.to_str()

	def __repr__(self) -> str:
		return self.to_repr()


class PythonExtensionModuleValue:
	TYPE = "PythonExtensionModule"

	_INTRINSIC: Dict[str, Getter] = {
		"name": lambda v: v.inner.name,
	}

	def __init__(self, module: ExtensionModule) -> None:
		self.inner = module

	def as_resource(self) -> ExtensionModule:
		return self.inner

	def type_name(self) -> str:
		return self.TYPE

	def to_str(self) -> str:
		return f"{self.TYPE}<name={self.inner.name}>"

	def to_repr(self) -> str:
		return self.to_str()

	def to_bool(self) -> bool:
		return True

	def attr_names(self) -> list[str]:
		return list(self._INTRINSIC)

	def has_attr(self, attribute: str) -> bool:
		return attribute in self._INTRINSIC

	def get_attr(self, attribute: str) -> object:
		return _dispatch_get(self, self._INTRINSIC, attribute, with_context=False)

	def set_attr(self, attribute: str, value: object) -> None:
		_dispatch_set(self, attribute, value, with_context=False)

	def to_dict(self) -> Dict[str, object]:
		return {"type": self.TYPE, "name": self.inner.name}

	def __str__(self) -> str:
		return self.to_str()

	def __repr__(self) -> str:
		return self.to_repr()


ResourceValue = (
	PythonSourceModuleValue
	| PythonPackageResourceValue
	| PythonPackageDistributionResourceValue
	| PythonExtensionModuleValue
)


def is_resource_value(value: object) -> bool:
	return isinstance(
		value,
		(
			PythonSourceModuleValue,
			PythonPackageResourceValue,
			PythonPackageDistributionResourceValue,
			PythonExtensionModuleValue,
		),
	)
