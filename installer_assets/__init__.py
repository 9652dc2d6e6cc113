"""
installer-assets generates the static files needed to bootstrap a cluster.

Every piece of output is an asset: a node in a dependency graph that declares
the assets it needs and is generated exactly once per pass, after all of its
dependencies. The `resolver` walks the graph, the `store` holds the generated
assets of the pass and `manifests.Manifests` assembles the final manifests.
"""

__all__ = [
    "asset",
    "resolver",
    "store",
    "template",
    "installconfig",
    "tls",
    "kubeconfig",
    "ignition",
    "manifests",
    "writer",
    "exceptions",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
