"""Configuration for the operators that run the cluster control plane.

Each operator config asset produces a single YAML blob derived from the
install config. The blobs are not applied on their own; the `Manifests`
asset aggregates them into the cluster config maps read by the operators.
"""

from abc import abstractmethod
import logging
from typing import Any, ClassVar

import yaml

from installer_assets.asset import Asset, GeneratedFile, Parents, WritableAsset
from installer_assets.installconfig import (
    MASTER_POOL,
    WORKER_POOL,
    InstallConfig,
    InstallConfigSpec,
)

__all__ = [
    "OperatorConfig",
    "KubeCoreOperator",
    "NetworkOperator",
    "KubeAddonOperator",
    "MachineAPIOperator",
]

_LOGGER = logging.getLogger(__name__)

MANIFEST_DIR = "manifests"
ETCD_PORT = 2379
OIDC_CLIENT_ID = "tectonic-kubectl"
CLUSTER_API_NAMESPACE = "openshift-cluster-api"
DEFAULT_MTU = "1450"


class OperatorConfig(WritableAsset):
    """Base class for an asset producing the config blob of one operator."""

    asset_name: ClassVar[str]
    """Human friendly name of the asset."""

    filename: ClassVar[str]
    """Name of the config file under the manifests directory."""

    def __init__(self, data: bytes | None = None) -> None:
        """Initialize the asset, optionally with an existing config blob."""
        self._data = data

    def name(self) -> str:
        return self.asset_name

    def dependencies(self) -> list[type[Asset]]:
        return [InstallConfig]

    @abstractmethod
    def build_config(self, config: InstallConfigSpec) -> dict[str, Any]:
        """Return the operator config for the install config."""

    def generate(self, parents: Parents) -> None:
        config = parents.get(InstallConfig).config
        self._data = yaml.dump(self.build_config(config), sort_keys=False).encode()
        _LOGGER.debug("Generated %s config %s", self.name(), self.filename)

    @property
    def data(self) -> bytes:
        """The serialized operator config."""
        return self._require(self._data)

    def files(self) -> list[GeneratedFile]:
        return [GeneratedFile(f"{MANIFEST_DIR}/{self.filename}", self.data)]


class KubeCoreOperator(OperatorConfig):
    """Config for the operator managing the core kubernetes components."""

    asset_name = "Kube Core Operator"
    filename = "kco-config.yaml"

    def build_config(self, config: InstallConfigSpec) -> dict[str, Any]:
        base_address = f"{config.cluster_name}.{config.base_domain}"
        etcd_servers = [
            f"https://{config.cluster_name}-etcd-{i}.{config.base_domain}:{ETCD_PORT}"
            for i in range(config.replicas(MASTER_POOL))
        ]
        return {
            "apiVersion": "v1",
            "kind": "KubeCoreOperatorConfig",
            "clusterConfig": {
                "apiserver_url": config.api_url,
            },
            "authConfig": {
                "oidc_client_id": OIDC_CLIENT_ID,
                "oidc_issuer_url": f"https://{base_address}/identity",
                "oidc_groups_claim": "groups",
                "oidc_username_claim": "email",
            },
            "cloudProviderConfig": {
                "cloud_config_path": "",
                "cloud_provider_profile": config.platform_name,
            },
            "networkConfig": {
                "advertise_address": "0.0.0.0",
                "cluster_cidr": config.networking.pod_cidr,
                "etcd_servers": ",".join(etcd_servers),
                "service_cidr": config.networking.service_cidr,
            },
            "routingConfig": {
                "subdomain": base_address,
            },
        }


class NetworkOperator(OperatorConfig):
    """Config for the operator deploying the pod network."""

    asset_name = "Network Operator"
    filename = "network-config.yaml"

    def build_config(self, config: InstallConfigSpec) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "TectonicNetworkOperatorConfig",
            "podCIDR": config.networking.pod_cidr,
            "calicoConfig": {
                "mtu": DEFAULT_MTU,
            },
            "networkProfile": config.networking.type,
        }


class KubeAddonOperator(OperatorConfig):
    """Config for the operator deploying cluster add-ons."""

    asset_name = "Kube Addon Operator"
    filename = "addon-config.yaml"

    def build_config(self, config: InstallConfigSpec) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "AddonConfig",
            "cloudProvider": config.platform_name,
            "clusterConfig": {
                "apiserver_url": config.api_url,
            },
        }


class MachineAPIOperator(OperatorConfig):
    """Config for the operator reconciling machines through the cluster API."""

    asset_name = "Machine API Operator"
    filename = "mao-config.yaml"

    def build_config(self, config: InstallConfigSpec) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "machineAPIOperatorConfig",
            "clusterName": config.cluster_name,
            "clusterID": config.cluster_id,
            "provider": config.platform_name,
            "replicas": config.replicas(WORKER_POOL),
            "targetNamespace": CLUSTER_API_NAMESPACE,
        }
