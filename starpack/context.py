# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass

from starpack.location import ConcreteLocation, InMemory, is_concrete


@dataclass
class CollectionContext:
	"""
	How a single resource is added to a collection.

	`location` always holds a concrete placement; only `location_fallback` may
	be absent.
	"""

	include: bool = True
	location: ConcreteLocation = InMemory()
	location_fallback: ConcreteLocation | None = None
	store_source: bool = False
	optimize_level_zero: bool = False
	optimize_level_one: bool = False
	optimize_level_two: bool = False

	def __post_init__(self) -> None:
		if not is_concrete(self.location):
			raise ValueError(f"collection context location must be concrete, got {self.location!r}")
		if self.location_fallback is not None and not is_concrete(self.location_fallback):
			raise ValueError(f"collection context fallback must be concrete or None, got {self.location_fallback!r}")
