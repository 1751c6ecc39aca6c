# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import logging
from typing import Iterable

from starpack.errors import PreconditionViolation
from starpack.policy import PackagingPolicy, apply_policy
from starpack.resources import (
	ExtensionModule,
	ModuleSource,
	PackageDistributionResource,
	PackageResource,
	PythonResource,
	resource_kind,
)
from starpack.values import (
	PythonExtensionModuleValue,
	PythonPackageDistributionResourceValue,
	PythonPackageResourceValue,
	PythonSourceModuleValue,
	ResourceValue,
)

logger = logging.getLogger(__name__)

_COMPATIBLE = (ModuleSource, PackageResource, PackageDistributionResource, ExtensionModule)


def is_compatible(resource: object) -> bool:
	"""Whether a resource can be converted to a configuration-language value."""
	return isinstance(resource, _COMPATIBLE)


def resource_to_value(resource: PythonResource, policy: PackagingPolicy) -> ResourceValue:
	"""
	Convert a resource record into its configuration-language value.

	Context-bearing kinds get their collection context from `policy` before
	being returned. Callers must filter through `is_compatible()` first.
	"""
	if isinstance(resource, ModuleSource):
		m = PythonSourceModuleValue(resource)
		apply_policy(m, policy)
		return m
	if isinstance(resource, PackageResource):
		r = PythonPackageResourceValue(resource)
		apply_policy(r, policy)
		return r
	if isinstance(resource, PackageDistributionResource):
		d = PythonPackageDistributionResourceValue(resource)
		apply_policy(d, policy)
		return d
	if isinstance(resource, ExtensionModule):
		return PythonExtensionModuleValue(resource)
	raise PreconditionViolation(
		f"incompatible resource {resource_kind(resource)} passed; did you forget to filter through is_compatible()?"
	)


def resources_to_values(resources: Iterable[PythonResource], policy: PackagingPolicy) -> list[ResourceValue]:
	out: list[ResourceValue] = []
	for resource in resources:
		if not is_compatible(resource):
			logger.debug(f"skipping incompatible resource {resource_kind(resource)}")
			continue
		out.append(resource_to_value(resource, policy))
	return out
