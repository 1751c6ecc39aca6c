# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from starpack.cli import main

raise SystemExit(main())
