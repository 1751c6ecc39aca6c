# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import ast as py_ast
from pathlib import Path

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from starpack.errors import ScriptError
from starpack.script.ast import (
	AssignStmt,
	Attr,
	Call,
	Expr,
	ExprStmt,
	Literal,
	Located,
	Name,
	Program,
	SetAttrStmt,
	Stmt,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start=["program", "expr"],
	propagate_positions=True,
	maybe_placeholders=False,
)

_UNKNOWN_LOC = Located(line=0, column=0)


def parse_script(source: str) -> Program:
	if not source.endswith("\n"):
		source += "\n"
	tree = _parse(source, start="program")
	return Program(statements=[_build_stmt(child) for child in tree.children if isinstance(child, Tree)])


def parse_expr(source: str) -> Expr:
	return _build_expr(_parse(source.strip(), start="expr"))


def _parse(source: str, *, start: str) -> Tree | Token:
	try:
		return _PARSER.parse(source, start=start)
	except UnexpectedInput as err:
		line = getattr(err, "line", None)
		column = getattr(err, "column", None)
		raise ScriptError(
			reason_code="script-parse",
			message=f"syntax error: {err.get_context(source).strip() or 'unexpected end of input'}",
			label="parse",
			line=line if isinstance(line, int) and line > 0 else None,
			column=column if isinstance(column, int) and column > 0 else None,
		) from err


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	return node.type


def _loc(node: Tree | Token, fallback: Located = _UNKNOWN_LOC) -> Located:
	if isinstance(node, Token):
		return Located(line=node.line or fallback.line, column=node.column or fallback.column)
	meta = node.meta
	if getattr(meta, "empty", True):
		return fallback
	return Located(line=meta.line, column=meta.column)


def _build_stmt(tree: Tree) -> Stmt:
	kind = _name(tree)
	loc = _loc(tree)
	if kind == "assign_stmt":
		target, value = tree.children
		return AssignStmt(target=str(target), value=_build_expr(value, loc), loc=loc)
	if kind == "setattr_stmt":
		target, attr, value = tree.children
		return SetAttrStmt(target=_build_expr(target, loc), attr=str(attr), value=_build_expr(value, loc), loc=loc)
	if kind == "expr_stmt":
		return ExprStmt(value=_build_expr(tree.children[0], loc), loc=loc)
	raise TypeError(f"unexpected statement node {kind}")


def _build_expr(node: Tree | Token, fallback: Located = _UNKNOWN_LOC) -> Expr:
	loc = _loc(node, fallback)
	kind = _name(node)
	if kind == "string":
		raw = str(node.children[0])
		try:
			text = py_ast.literal_eval(raw)
		except (SyntaxError, ValueError) as err:
			raise ScriptError(
				reason_code="script-parse",
				message=f"invalid string literal {raw}: {err}",
				label="string",
				line=loc.line or None,
				column=loc.column or None,
			) from err
		return Literal(value=text, loc=loc)
	if kind == "int":
		return Literal(value=int(str(node.children[0])), loc=loc)
	if kind == "true":
		return Literal(value=True, loc=loc)
	if kind == "false":
		return Literal(value=False, loc=loc)
	if kind == "none":
		return Literal(value=None, loc=loc)
	if kind == "var":
		return Name(ident=str(node.children[0]), loc=loc)
	if kind == "getattr":
		value, attr = node.children
		return Attr(value=_build_expr(value, loc), attr=str(attr), loc=loc)
	if kind == "call":
		func = str(node.children[0])
		args: list[Expr] = []
		kwargs: dict[str, Expr] = {}
		arg_nodes = node.children[1].children if len(node.children) > 1 else []
		for arg in arg_nodes:
			if isinstance(arg, Tree) and _name(arg) == "kwarg":
				key, value = arg.children
				if str(key) in kwargs:
					raise ScriptError(
						reason_code="script-parse",
						message=f"duplicate keyword argument '{key}' in call to {func}",
						label=func,
						line=loc.line or None,
						column=loc.column or None,
					)
				kwargs[str(key)] = _build_expr(value, loc)
				continue
			if kwargs:
				raise ScriptError(
					reason_code="script-parse",
					message=f"positional argument follows keyword argument in call to {func}",
					label=func,
					line=loc.line or None,
					column=loc.column or None,
				)
			args.append(_build_expr(arg, loc))
		return Call(func=func, args=args, kwargs=kwargs, loc=loc)
	raise TypeError(f"unexpected expression node {kind}")
