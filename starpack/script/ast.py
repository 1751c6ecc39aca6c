# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


@dataclass
class Literal:
	value: object
	loc: Located


@dataclass
class Name:
	ident: str
	loc: Located


@dataclass
class Attr:
	value: "Expr"
	attr: str
	loc: Located


@dataclass
class Call:
	func: str
	args: List["Expr"]
	loc: Located
	kwargs: Dict[str, "Expr"] = field(default_factory=dict)


Expr = Union[Literal, Name, Attr, Call]


@dataclass
class AssignStmt:
	target: str
	value: Expr
	loc: Located


@dataclass
class SetAttrStmt:
	target: Expr
	attr: str
	value: Expr
	loc: Located


@dataclass
class ExprStmt:
	value: Expr
	loc: Located


Stmt = Union[AssignStmt, SetAttrStmt, ExprStmt]


@dataclass
class Program:
	statements: List[Stmt]
