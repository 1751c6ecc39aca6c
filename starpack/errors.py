# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class StarpackError(Exception):
	"""
	A structured, script-visible error.

	Every failure surfaced to a configuration script carries a stable reason code
	plus enough context (value kind, attribute, label) to point the script author
	at the offending statement.
	"""

	reason_code: str
	message: str
	label: str | None = None
	type_name: str | None = None
	attribute: str | None = None

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"label": self.label,
			"type_name": self.type_name,
			"attribute": self.attribute,
		}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.label:
			parts.append(f"label={self.label}")
		return " ".join(parts)


@dataclass(frozen=True)
class LocationDecodeError(StarpackError):
	# Offending raw value; excluded from eq/hash since it may be unhashable.
	value: object = field(default=None, compare=False)


@dataclass(frozen=True)
class UnsupportedAttributeError(StarpackError):
	operation: str = "getattr"


@dataclass(frozen=True)
class MissingContextError(StarpackError):
	pass


@dataclass(frozen=True)
class SourceResolutionError(StarpackError):
	pass


@dataclass(frozen=True)
class TextDecodingError(StarpackError):
	pass


@dataclass(frozen=True)
class PolicyConfigError(StarpackError):
	path: str | None = None

	def format_human(self) -> str:
		base = super().format_human()
		if self.path:
			return f"{base} path={self.path}"
		return base


@dataclass(frozen=True)
class ScriptError(StarpackError):
	line: int | None = None
	column: int | None = None

	def format_human(self) -> str:
		where = f"line {self.line}: " if self.line is not None else ""
		parts: list[str] = [f"[{self.reason_code}] {where}{self.message}"]
		if self.label:
			parts.append(f"label={self.label}")
		return " ".join(parts)


class PreconditionViolation(RuntimeError):
	"""
	Internal invariant broken by a caller (programming error).

	Not a `StarpackError`: script drivers and the CLI never catch it.
	"""


def unsupported_attribute(type_name: str, attribute: str, *, operation: str, expected: list[str]) -> UnsupportedAttributeError:
	verb = "set" if operation == "setattr" else "get"
	names = ", ".join(expected) if expected else "<none>"
	return UnsupportedAttributeError(
		reason_code="unsupported-attribute",
		message=f"cannot {verb} attribute '{attribute}' on {type_name}; expected one of: {names}",
		label=f"{operation}({attribute})",
		type_name=type_name,
		attribute=attribute,
		operation=operation,
	)
