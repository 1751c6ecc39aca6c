# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Python resource records.

Records are produced by resource discovery (scanning a distribution, a source
tree, etc.) and are immutable here. Only a subset of kinds is exposed to
configuration scripts; see `starpack.adapter.is_compatible`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class FileData:
	"""Bytes held in memory or backed by a file on disk."""

	data: bytes | None = None
	path: Path | None = None

	def __post_init__(self) -> None:
		if (self.data is None) == (self.path is None):
			raise ValueError("FileData requires exactly one of data or path")

	@classmethod
	def from_text(cls, text: str) -> "FileData":
		return cls(data=text.encode("utf-8"))

	def resolve(self) -> bytes:
		if self.data is not None:
			return self.data
		return self.path.read_bytes()  # type: ignore[union-attr]


@dataclass(frozen=True)
class ModuleSource:
	name: str
	source: FileData
	is_package: bool = False
	is_stdlib: bool = False
	is_test: bool = False


@dataclass(frozen=True)
class PackageResource:
	leaf_package: str
	relative_name: str
	data: FileData
	is_stdlib: bool = False
	is_test: bool = False


@dataclass(frozen=True)
class PackageDistributionResource:
	package: str
	version: str
	name: str
	data: FileData


@dataclass(frozen=True)
class ExtensionModule:
	name: str
	init_fn: str | None = None
	extension_file_suffix: str = ""
	shared_library: FileData | None = None
	is_package: bool = False
	is_stdlib: bool = False
	builtin_default: bool = False
	required: bool = False


@dataclass(frozen=True)
class ModuleBytecode:
	name: str
	bytecode: FileData
	optimize_level: int = 0
	is_package: bool = False


@dataclass(frozen=True)
class ModuleBytecodeRequest:
	name: str
	source: FileData
	optimize_level: int = 0
	is_package: bool = False


@dataclass(frozen=True)
class SharedLibrary:
	name: str
	data: FileData
	filename: str | None = None


@dataclass(frozen=True)
class EggFile:
	data: FileData


@dataclass(frozen=True)
class PathExtension:
	data: FileData


PythonResource = Union[
	ModuleSource,
	PackageResource,
	PackageDistributionResource,
	ExtensionModule,
	ModuleBytecode,
	ModuleBytecodeRequest,
	SharedLibrary,
	EggFile,
	PathExtension,
]


def resource_kind(resource: object) -> str:
	return type(resource).__name__
