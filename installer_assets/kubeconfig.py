"""Kubeconfig assets granting access to the cluster API."""

import base64
import logging
from typing import Any

import yaml

from .asset import Asset, GeneratedFile, Parents, WritableAsset
from .installconfig import InstallConfig
from .tls import AdminCertKey, RootCA

__all__ = [
    "AdminKubeconfig",
]

_LOGGER = logging.getLogger(__name__)

ADMIN_KUBECONFIG_FILENAME = "auth/kubeconfig"
ADMIN_USER = "admin"


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


def kubeconfig(
    cluster_name: str,
    server: str,
    ca_cert: bytes,
    user_name: str,
    client_cert: bytes,
    client_key: bytes,
) -> dict[str, Any]:
    """Return a kubeconfig with a single cluster, user and context."""
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [
            {
                "name": cluster_name,
                "cluster": {
                    "server": server,
                    "certificate-authority-data": _b64(ca_cert),
                },
            }
        ],
        "users": [
            {
                "name": user_name,
                "user": {
                    "client-certificate-data": _b64(client_cert),
                    "client-key-data": _b64(client_key),
                },
            }
        ],
        "contexts": [
            {
                "name": user_name,
                "context": {"cluster": cluster_name, "user": user_name},
            }
        ],
        "current-context": user_name,
        "preferences": {},
    }


class AdminKubeconfig(WritableAsset):
    """The kubeconfig of the cluster administrator."""

    def __init__(self, data: bytes | None = None) -> None:
        """Initialize the asset, optionally with an existing kubeconfig."""
        self._data = data

    def name(self) -> str:
        return "Kubeconfig Admin"

    def dependencies(self) -> list[type[Asset]]:
        return [RootCA, AdminCertKey, InstallConfig]

    def generate(self, parents: Parents) -> None:
        root_ca = parents.get(RootCA)
        admin = parents.get(AdminCertKey)
        config = parents.get(InstallConfig).config
        content = kubeconfig(
            cluster_name=config.cluster_name,
            server=config.api_url,
            ca_cert=root_ca.cert(),
            user_name=ADMIN_USER,
            client_cert=admin.cert(),
            client_key=admin.key(),
        )
        self._data = yaml.dump(content, sort_keys=False).encode()
        _LOGGER.debug(
            "Generated kubeconfig for user %s of cluster %s",
            ADMIN_USER,
            config.cluster_name,
        )

    def files(self) -> list[GeneratedFile]:
        return [GeneratedFile(ADMIN_KUBECONFIG_FILENAME, self._require(self._data))]
