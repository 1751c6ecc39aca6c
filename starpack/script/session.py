# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Statement-at-a-time script execution.

A failing statement aborts with a `ScriptError` that names the line and the
failing attribute or call; the original error is chained as `__cause__`.
Effects of earlier statements persist. `PreconditionViolation` is never
converted: it propagates as-is.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from starpack.adapter import resource_to_value
from starpack.errors import ScriptError, StarpackError, unsupported_attribute
from starpack.policy import PackagingPolicy
from starpack.resources import ExtensionModule, FileData, ModuleSource, PackageDistributionResource, PackageResource
from starpack.script.ast import AssignStmt, Attr, Call, Expr, ExprStmt, Literal, Located, Name, SetAttrStmt, Stmt
from starpack.script.parser import parse_expr, parse_script
from starpack.values import ResourceValue, is_resource_value

logger = logging.getLogger(__name__)

Builtin = Callable[..., object]


def _require_str(func: str, param: str, value: object) -> str:
	if not isinstance(value, str):
		raise TypeError(f"{func}() argument '{param}' must be a string, got {type(value).__name__}")
	return value


def _type_name(value: object) -> str:
	if is_resource_value(value):
		return value.type_name()  # type: ignore[union-attr]
	if value is None:
		return "NoneType"
	return type(value).__name__


class ScriptSession:
	def __init__(self, policy: Optional[PackagingPolicy] = None) -> None:
		self.policy = policy if policy is not None else PackagingPolicy()
		self.globals: Dict[str, object] = {}
		self._builtins: Dict[str, Builtin] = {
			"make_source_module": self._make_source_module,
			"make_package_resource": self._make_package_resource,
			"make_distribution_resource": self._make_distribution_resource,
			"make_extension_module": self._make_extension_module,
		}

	def run(self, source: str) -> None:
		for stmt in parse_script(source).statements:
			self.execute(stmt)

	def eval(self, source: str) -> object:
		expr = parse_expr(source)
		return self._guard(lambda: self._eval(expr), loc=expr.loc, label=_expr_label(expr))

	def resource_values(self) -> Dict[str, ResourceValue]:
		return {name: value for name, value in self.globals.items() if is_resource_value(value)}  # type: ignore[misc]

	def execute(self, stmt: Stmt) -> None:
		logger.debug(f"line {stmt.loc.line}: {type(stmt).__name__}")
		if isinstance(stmt, AssignStmt):
			value = self._guard(lambda: self._eval(stmt.value), loc=stmt.loc, label=_expr_label(stmt.value))
			self.globals[stmt.target] = value
			return
		if isinstance(stmt, SetAttrStmt):
			self._guard(lambda: self._set_attr(stmt), loc=stmt.loc, label=f"setattr({stmt.attr})")
			return
		if isinstance(stmt, ExprStmt):
			self._guard(lambda: self._eval(stmt.value), loc=stmt.loc, label=_expr_label(stmt.value))
			return
		raise TypeError(f"unsupported statement {type(stmt).__name__}")

	def _guard(self, thunk: Callable[[], object], *, loc: Located, label: str) -> object:
		try:
			return thunk()
		except ScriptError:
			raise
		except StarpackError as err:
			raise ScriptError(
				reason_code="script",
				message=err.message,
				label=err.label or label,
				type_name=err.type_name,
				attribute=err.attribute,
				line=loc.line or None,
				column=loc.column or None,
			) from err
		except TypeError as err:
			raise ScriptError(
				reason_code="script-call",
				message=str(err),
				label=label,
				line=loc.line or None,
				column=loc.column or None,
			) from err

	def _set_attr(self, stmt: SetAttrStmt) -> None:
		target = self._eval(stmt.target)
		value = self._eval(stmt.value)
		if not is_resource_value(target):
			raise unsupported_attribute(_type_name(target), stmt.attr, operation="setattr", expected=[])
		target.set_attr(stmt.attr, value)  # type: ignore[union-attr]

	def _eval(self, expr: Expr) -> object:
		if isinstance(expr, Literal):
			return expr.value
		if isinstance(expr, Name):
			if expr.ident in self.globals:
				return self.globals[expr.ident]
			raise ScriptError(
				reason_code="script-name",
				message=f"unknown identifier '{expr.ident}'",
				label=expr.ident,
				line=expr.loc.line or None,
				column=expr.loc.column or None,
			)
		if isinstance(expr, Attr):
			value = self._eval(expr.value)
			if not is_resource_value(value):
				raise unsupported_attribute(_type_name(value), expr.attr, operation="getattr", expected=[])
			return value.get_attr(expr.attr)  # type: ignore[union-attr]
		if isinstance(expr, Call):
			func = self._builtins.get(expr.func)
			if func is None:
				raise ScriptError(
					reason_code="script-name",
					message=f"unknown function '{expr.func}'; expected one of: {', '.join(self._builtins)}",
					label=expr.func,
					line=expr.loc.line or None,
					column=expr.loc.column or None,
				)
			args = [self._eval(a) for a in expr.args]
			kwargs = {k: self._eval(v) for k, v in expr.kwargs.items()}
			return func(*args, **kwargs)
		raise TypeError(f"unsupported expression {type(expr).__name__}")

	def _make_source_module(self, name: object, source: object, is_package: object = False) -> ResourceValue:
		module = ModuleSource(
			name=_require_str("make_source_module", "name", name),
			source=FileData.from_text(_require_str("make_source_module", "source", source)),
			is_package=bool(is_package),
		)
		return resource_to_value(module, self.policy)

	def _make_package_resource(self, package: object, name: object, data: object = "") -> ResourceValue:
		resource = PackageResource(
			leaf_package=_require_str("make_package_resource", "package", package),
			relative_name=_require_str("make_package_resource", "name", name),
			data=FileData.from_text(_require_str("make_package_resource", "data", data)),
		)
		return resource_to_value(resource, self.policy)

	def _make_distribution_resource(
		self, package: object, name: object, data: object = "", version: object = "0.0.0"
	) -> ResourceValue:
		resource = PackageDistributionResource(
			package=_require_str("make_distribution_resource", "package", package),
			version=_require_str("make_distribution_resource", "version", version),
			name=_require_str("make_distribution_resource", "name", name),
			data=FileData.from_text(_require_str("make_distribution_resource", "data", data)),
		)
		return resource_to_value(resource, self.policy)

	def _make_extension_module(self, name: object) -> ResourceValue:
		return resource_to_value(ExtensionModule(name=_require_str("make_extension_module", "name", name)), self.policy)


def _expr_label(expr: Expr) -> str:
	if isinstance(expr, Call):
		return f"{expr.func}()"
	if isinstance(expr, Attr):
		return f"getattr({expr.attr})"
	if isinstance(expr, Name):
		return expr.ident
	return "expression"
