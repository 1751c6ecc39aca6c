# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Configuration script driver.

Parses line-oriented scripts (assignments, attribute get/set, resource
constructor calls) and executes them one statement at a time against resource
values, the way a configuration-language evaluator drives the attribute
surface.
"""

from starpack.script.parser import parse_expr, parse_script
from starpack.script.session import ScriptSession

__all__ = ["ScriptSession", "parse_expr", "parse_script"]
