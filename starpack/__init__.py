# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
starpack: Python resources as configuration-language values.

Layers:
  location:   resource location codec (string form <-> tagged union)
  context:    collection context attached to a resource
  policy:     packaging policy deriving default contexts
  capability: shared collection-context attribute surface
  values:     per-kind resource wrappers seen by configuration scripts
  adapter:    resource record -> wrapper conversion
  script:     minimal statement driver for configuration scripts
"""

__all__ = ["adapter", "capability", "context", "errors", "location", "policy", "resources", "script", "values"]
