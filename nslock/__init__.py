"""nslock — namespace registry and companion lockfile for dependency manifests.

Namespaces disambiguate identically-named packages that come from different
logical groups on the same source. This package provides:
1. Registry — in-memory index of (source, namespace, package) triples
2. Lockfile — deterministic YAML writer and strict reader
3. Validator — drift detection between the registry and the lockfile
"""

__version__ = "0.1.0"

DEFAULT_LOCKFILE = "bundler-namespace-lock.yaml"
