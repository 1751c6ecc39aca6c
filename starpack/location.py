# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Resource location codec.

Locations are a tagged union internally and only become strings at the
configuration-language boundary:

  Default                 <-> None / "default"   (decode only; never at rest)
  InMemory                <-> "in-memory"
  FilesystemRelative(p)   <-> "filesystem-relative:<p>"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from starpack.errors import LocationDecodeError

IN_MEMORY = "in-memory"
DEFAULT = "default"
FILESYSTEM_RELATIVE_PREFIX = "filesystem-relative:"

_EXPECTED = f"expected `{DEFAULT}`, `{IN_MEMORY}`, or `{FILESYSTEM_RELATIVE_PREFIX}*`"


@dataclass(frozen=True)
class DefaultLocation:
	"""No explicit placement."""


@dataclass(frozen=True)
class InMemory:
	pass


@dataclass(frozen=True)
class FilesystemRelative:
	prefix: str


ConcreteLocation = Union[InMemory, FilesystemRelative]
ResourceLocation = Union[DefaultLocation, InMemory, FilesystemRelative]


def is_concrete(location: ResourceLocation) -> bool:
	return isinstance(location, (InMemory, FilesystemRelative))


def encode(location: ResourceLocation | None) -> str | None:
	if location is None or isinstance(location, DefaultLocation):
		return None
	if isinstance(location, InMemory):
		return IN_MEMORY
	if isinstance(location, FilesystemRelative):
		return f"{FILESYSTEM_RELATIVE_PREFIX}{location.prefix}"
	raise TypeError(f"not a resource location: {location!r}")


def decode(value: object) -> ResourceLocation:
	"""
	Decode a configuration value into a resource location.

	`None` and the string `"default"` both decode to `DefaultLocation()`. Any
	other string must match one of the concrete shapes exactly (case-sensitive).
	"""
	if value is None:
		return DefaultLocation()
	if not isinstance(value, str):
		type_name = type(value).__name__
		raise LocationDecodeError(
			reason_code="location-decode",
			message=f"unable to convert value of type {type_name} to a resource location",
			label=f"{_EXPECTED}; got {type_name}",
			value=value,
		)
	if value == DEFAULT:
		return DefaultLocation()
	if value == IN_MEMORY:
		return InMemory()
	if value.startswith(FILESYSTEM_RELATIVE_PREFIX):
		return FilesystemRelative(prefix=value[len(FILESYSTEM_RELATIVE_PREFIX):])
	raise LocationDecodeError(
		reason_code="location-decode",
		message=f"unable to convert value {value} to a resource location",
		label=f"{_EXPECTED}; got {value}",
		value=value,
	)


def decode_concrete(value: object, *, what: str = "resource location") -> ConcreteLocation:
	"""Decode and reject `DefaultLocation` (for fields that must hold a real placement)."""
	location = decode(value)
	if not is_concrete(location):
		raise LocationDecodeError(
			reason_code="location-decode",
			message=f"{what} must be `{IN_MEMORY}` or `{FILESYSTEM_RELATIVE_PREFIX}*`; got {value!r}",
			label=what,
			value=value,
		)
	return location  # type: ignore[return-value]
