"""Assets for the manifests applied to the cluster during bootstrap."""

from .configmap import ConfigurationObject, config_map
from .manifests import BOOTKUBE_MANIFESTS, BootkubeTemplateData, Manifests
from .operators import (
    KubeAddonOperator,
    KubeCoreOperator,
    MachineAPIOperator,
    NetworkOperator,
)

__all__ = [
    "BOOTKUBE_MANIFESTS",
    "BootkubeTemplateData",
    "ConfigurationObject",
    "KubeAddonOperator",
    "KubeCoreOperator",
    "MachineAPIOperator",
    "Manifests",
    "NetworkOperator",
    "config_map",
]
