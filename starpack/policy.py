# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Packaging policy (v0).

The policy decides the default collection context of each resource. Scripts
may override the derived values afterwards through the capability attributes;
the policy is consulted only once, when a resource value is created.

Policy files are versioned JSON objects:

	{"format": "starpack-policy", "version": 0, "resources_location": "in-memory", ...}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

from starpack.context import CollectionContext
from starpack.errors import LocationDecodeError, PolicyConfigError
from starpack.location import (
	ConcreteLocation,
	FilesystemRelative,
	InMemory,
	decode,
	decode_concrete,
	encode,
	is_concrete,
)
from starpack.resources import (
	ModuleSource,
	PackageResource,
	PythonResource,
)

if TYPE_CHECKING:
	from starpack.capability import ResourceCollectionContext

logger = logging.getLogger(__name__)

POLICY_FORMAT = "starpack-policy"
POLICY_VERSION = 0

_MODE_IN_MEMORY_ONLY = "in-memory-only"
_MODE_FILESYSTEM_ONLY = "filesystem-relative-only:"
_MODE_PREFER_IN_MEMORY = "prefer-in-memory-fallback-filesystem-relative:"

_BOOL_FIELDS = (
	"include_distribution_sources",
	"include_non_distribution_sources",
	"include_distribution_resources",
	"include_test",
	"bytecode_optimize_level_zero",
	"bytecode_optimize_level_one",
	"bytecode_optimize_level_two",
)


@dataclass
class PackagingPolicy:
	resources_location: ConcreteLocation = InMemory()
	resources_location_fallback: ConcreteLocation | None = None
	include_distribution_sources: bool = True
	include_non_distribution_sources: bool = True
	include_distribution_resources: bool = False
	include_test: bool = False
	bytecode_optimize_level_zero: bool = True
	bytecode_optimize_level_one: bool = False
	bytecode_optimize_level_two: bool = False

	def set_resource_handling_mode(self, mode: str) -> None:
		"""
		Apply a named placement preset.

		- `in-memory-only`
		- `filesystem-relative-only:<prefix>`
		- `prefer-in-memory-fallback-filesystem-relative:<prefix>`
		"""
		if mode == _MODE_IN_MEMORY_ONLY:
			self.resources_location = InMemory()
			self.resources_location_fallback = None
		elif mode.startswith(_MODE_FILESYSTEM_ONLY):
			self.resources_location = FilesystemRelative(prefix=mode[len(_MODE_FILESYSTEM_ONLY):])
			self.resources_location_fallback = None
		elif mode.startswith(_MODE_PREFER_IN_MEMORY):
			self.resources_location = InMemory()
			self.resources_location_fallback = FilesystemRelative(prefix=mode[len(_MODE_PREFER_IN_MEMORY):])
		else:
			raise PolicyConfigError(
				reason_code="policy-config",
				message=(
					f"unknown resource handling mode '{mode}'; expected `{_MODE_IN_MEMORY_ONLY}`, "
					f"`{_MODE_FILESYSTEM_ONLY}<prefix>`, or `{_MODE_PREFER_IN_MEMORY}<prefix>`"
				),
				label="resource_handling_mode",
			)
		logger.debug(f"applied resource handling mode {mode}")

	def filter_resource(self, resource: PythonResource) -> bool:
		"""Whether `resource` should be collected at all."""
		if isinstance(resource, ModuleSource):
			if resource.is_test and not self.include_test:
				return False
			if resource.is_stdlib:
				return self.include_distribution_sources
			return self.include_non_distribution_sources
		if isinstance(resource, PackageResource):
			if resource.is_test and not self.include_test:
				return False
			if resource.is_stdlib:
				return self.include_distribution_resources
			return True
		# Distribution metadata and everything else is always collected.
		return True

	def derive_context(self, resource: PythonResource) -> CollectionContext:
		if isinstance(resource, ModuleSource):
			store_source = (
				self.include_distribution_sources if resource.is_stdlib else self.include_non_distribution_sources
			)
			return CollectionContext(
				include=self.filter_resource(resource),
				location=self.resources_location,
				location_fallback=self.resources_location_fallback,
				store_source=store_source,
				optimize_level_zero=self.bytecode_optimize_level_zero,
				optimize_level_one=self.bytecode_optimize_level_one,
				optimize_level_two=self.bytecode_optimize_level_two,
			)
		# Bytecode and source retention only apply to Python source.
		return CollectionContext(
			include=self.filter_resource(resource),
			location=self.resources_location,
			location_fallback=self.resources_location_fallback,
		)


def derive_context(resource: PythonResource, policy: PackagingPolicy) -> CollectionContext:
	return policy.derive_context(resource)


def apply_policy(holder: "ResourceCollectionContext", policy: PackagingPolicy) -> None:
	"""
	Replace the holder's collection context with one derived from `policy`.

	Any prior context (including script edits) is discarded.
	"""
	resource = holder.as_resource()
	holder.add_context = derive_context(resource, policy)
	logger.debug(f"applied packaging policy to {type(resource).__name__}")


def _config_err(msg: str, *, path: Path | None) -> PolicyConfigError:
	return PolicyConfigError(
		reason_code="policy-config",
		message=msg,
		label="policy",
		path=str(path) if path is not None else None,
	)


def policy_from_dict(data: Mapping[str, Any], *, path: Path | None = None) -> PackagingPolicy:
	if not isinstance(data, Mapping):
		raise _config_err("policy file must be a JSON object", path=path)
	version = data.get("version")
	if data.get("format") != POLICY_FORMAT or type(version) is not int or version != POLICY_VERSION:
		raise _config_err("unsupported policy format/version (upgrade starpack?)", path=path)
	allowed = {
		"format",
		"version",
		"resource_handling_mode",
		"resources_location",
		"resources_location_fallback",
		*_BOOL_FIELDS,
	}
	unknown = sorted(set(data.keys()) - allowed)
	if unknown:
		raise _config_err(f"policy has unknown fields: {', '.join(unknown)}", path=path)

	policy = PackagingPolicy()
	mode = data.get("resource_handling_mode")
	if mode is not None:
		if not isinstance(mode, str):
			raise _config_err("policy field 'resource_handling_mode' must be a string", path=path)
		try:
			policy.set_resource_handling_mode(mode)
		except PolicyConfigError as err:
			raise _config_err(err.message, path=path) from err

	try:
		if "resources_location" in data:
			policy.resources_location = decode_concrete(data["resources_location"], what="resources_location")
		if "resources_location_fallback" in data:
			fallback = decode(data["resources_location_fallback"])
			policy.resources_location_fallback = fallback if is_concrete(fallback) else None  # type: ignore[assignment]
	except LocationDecodeError as err:
		raise _config_err(f"invalid policy location: {err.message}", path=path) from err

	for name in _BOOL_FIELDS:
		if name not in data:
			continue
		value = data[name]
		if not isinstance(value, bool):
			raise _config_err(f"policy field '{name}' must be a boolean", path=path)
		setattr(policy, name, value)
	return policy


def load_policy(path: Path) -> PackagingPolicy:
	try:
		data = json.loads(path.read_text(encoding="utf-8"))
	except OSError as err:
		raise _config_err(f"unable to read policy file: {err}", path=path) from err
	except UnicodeDecodeError as err:
		raise _config_err(f"policy file is not valid UTF-8: {err}", path=path) from err
	except json.JSONDecodeError as err:
		raise _config_err(f"policy file is not valid JSON: {err}", path=path) from err
	policy = policy_from_dict(data, path=path)
	logger.debug(f"loaded packaging policy from {path}")
	return policy


def policy_to_dict(policy: PackagingPolicy) -> dict[str, Any]:
	out: dict[str, Any] = {"format": POLICY_FORMAT, "version": POLICY_VERSION}
	for f in fields(policy):
		value = getattr(policy, f.name)
		if f.name in ("resources_location", "resources_location_fallback"):
			out[f.name] = encode(value)
		else:
			out[f.name] = value
	return out


__all__ = [
	"PackagingPolicy",
	"apply_policy",
	"derive_context",
	"load_policy",
	"policy_from_dict",
	"policy_to_dict",
]
