# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from starpack.errors import StarpackError
from starpack.policy import PackagingPolicy, load_policy, policy_to_dict
from starpack.script import ScriptSession


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="starpack", description="Evaluate resource configuration scripts")
	p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	sub = p.add_subparsers(dest="cmd", required=True)

	run = sub.add_parser("run", help="Run a configuration script and report the resulting resources")
	run.add_argument("script", type=Path, help="Path to the configuration script")
	run.add_argument("--policy", type=Path, default=None, help="Path to a starpack-policy JSON file")
	run.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

	policy = sub.add_parser("policy", help="Print the effective packaging policy as JSON")
	policy.add_argument("--policy", type=Path, default=None, help="Path to a starpack-policy JSON file")
	policy.add_argument(
		"--mode",
		type=str,
		default=None,
		help="Resource handling mode applied on top of the policy (e.g. in-memory-only)",
	)
	return p


def _load_policy(path: Path | None) -> PackagingPolicy:
	if path is None:
		return PackagingPolicy()
	return load_policy(path)


def _emit_resources(session: ScriptSession, *, as_json: bool) -> None:
	values = session.resource_values()
	if as_json:
		obj = {name: value.to_dict() for name, value in values.items()}
		print(json.dumps(obj, sort_keys=True, separators=(",", ":")))
		return
	for name, value in values.items():
		print(f"{name} = {value.to_str()}")
		for key, attr in value.to_dict().items():
			if key == "type":
				continue
			print(f"  {key}: {json.dumps(attr)}")


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)
	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(name)s: %(message)s")

	try:
		if args.cmd == "run":
			policy = _load_policy(args.policy)
			try:
				source = args.script.read_text(encoding="utf-8")
			except OSError as err:
				print(f"starpack: unable to read script {args.script}: {err}", file=sys.stderr)
				return 2
			except UnicodeDecodeError as err:
				print(f"starpack: script {args.script} is not valid UTF-8: {err}", file=sys.stderr)
				return 2
			session = ScriptSession(policy)
			session.run(source)
			_emit_resources(session, as_json=bool(args.json))
			return 0

		if args.cmd == "policy":
			policy = _load_policy(args.policy)
			if args.mode:
				policy.set_resource_handling_mode(args.mode)
			print(json.dumps(policy_to_dict(policy), indent=2, sort_keys=True))
			return 0
	except StarpackError as err:
		print(f"starpack: {err.format_human()}", file=sys.stderr)
		return 1

	p.error(f"unknown command {args.cmd}")
	return 2
