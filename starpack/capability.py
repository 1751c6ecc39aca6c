# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Collection-context capability.

A resource value opts into the shared `add_*` attribute surface by holding an
optional `CollectionContext` in `add_context` and delegating the names listed
in `COLLECTION_CONTEXT_ATTRS` to the functions here. There is no base class:
kinds without a context (extension modules) simply do not delegate.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Protocol, Tuple

from starpack.context import CollectionContext
from starpack.errors import LocationDecodeError, MissingContextError, PreconditionViolation
from starpack.location import DefaultLocation, decode, encode
from starpack.resources import PythonResource


class ResourceCollectionContext(Protocol):
	TYPE: str
	add_context: Optional[CollectionContext]

	def as_resource(self) -> PythonResource:
		...


def _get_location(ctx: CollectionContext) -> object:
	return encode(ctx.location)


def _get_location_fallback(ctx: CollectionContext) -> object:
	return encode(ctx.location_fallback)


def _set_location(ctx: CollectionContext, value: object, *, type_name: str) -> None:
	location = decode(value)
	if isinstance(location, DefaultLocation):
		raise LocationDecodeError(
			reason_code="location-decode",
			message=f"add_location on {type_name} requires a concrete location; got {value!r}",
			label="setattr(add_location)",
			type_name=type_name,
			attribute="add_location",
			value=value,
		)
	ctx.location = location


def _set_location_fallback(ctx: CollectionContext, value: object, *, type_name: str) -> None:
	location = decode(value)
	ctx.location_fallback = None if isinstance(location, DefaultLocation) else location


def _flag(field_name: str) -> Tuple[Callable[[CollectionContext], object], Callable[..., None]]:
	def getter(ctx: CollectionContext) -> object:
		return getattr(ctx, field_name)

	def setter(ctx: CollectionContext, value: object, *, type_name: str) -> None:
		setattr(ctx, field_name, bool(value))

	return getter, setter


# attribute -> (getter, setter); order is the order reported in diagnostics.
_DISPATCH: Dict[str, Tuple[Callable[[CollectionContext], object], Callable[..., None]]] = {
	"add_include": _flag("include"),
	"add_location": (_get_location, _set_location),
	"add_location_fallback": (_get_location_fallback, _set_location_fallback),
	"add_source": _flag("store_source"),
	"add_bytecode_optimization_level_zero": _flag("optimize_level_zero"),
	"add_bytecode_optimization_level_one": _flag("optimize_level_one"),
	"add_bytecode_optimization_level_two": _flag("optimize_level_two"),
}

COLLECTION_CONTEXT_ATTRS: Tuple[str, ...] = tuple(_DISPATCH)


def is_context_attr(attribute: str) -> bool:
	return attribute in _DISPATCH


def get_context_attr(holder: ResourceCollectionContext, attribute: str) -> object:
	"""
	Read a collection-context attribute.

	Returns None for every attribute when the holder has no context. Callers
	must route only names in `COLLECTION_CONTEXT_ATTRS` here.
	"""
	entry = _DISPATCH.get(attribute)
	if entry is None:
		raise PreconditionViolation(f"get_context_attr({attribute}) called for a non-context attribute")
	ctx = holder.add_context
	if ctx is None:
		return None
	return entry[0](ctx)


def set_context_attr(holder: ResourceCollectionContext, attribute: str, value: object) -> None:
	"""
	Write a collection-context attribute.

	The write is all-or-nothing: decoding happens before any field is touched, so
	a rejected value leaves the context unchanged.
	"""
	entry = _DISPATCH.get(attribute)
	if entry is None:
		raise PreconditionViolation(f"set_context_attr({attribute}) called for a non-context attribute")
	ctx = holder.add_context
	if ctx is None:
		raise MissingContextError(
			reason_code="missing-context",
			message=f"cannot set {attribute} on {holder.TYPE}: no collection context to configure",
			label=f"setattr({attribute})",
			type_name=holder.TYPE,
			attribute=attribute,
		)
	entry[1](ctx, value, type_name=holder.TYPE)
