"""Ignition configs that machines boot from.

Machines do not receive their full configuration from the installer. The
installer writes a small pointer config that appends the config served by
the machine config server and trusts the root CA to reach it.
"""

import base64
import json
import logging
from typing import Any

from .asset import Asset, GeneratedFile, Parents, WritableAsset
from .installconfig import InstallConfig
from .tls import RootCA

__all__ = [
    "WorkerIgnition",
]

_LOGGER = logging.getLogger(__name__)

IGNITION_VERSION = "2.2.0"
MACHINE_CONFIG_SERVER_PORT = 49500
CORE_USER = "core"


def pointer_ignition_config(
    api_host: str, role: str, root_ca: bytes, ssh_key: str | None
) -> dict[str, Any]:
    """Return an ignition config that appends the role config from the machine config server."""
    source = f"https://{api_host}:{MACHINE_CONFIG_SERVER_PORT}/config/{role}"
    ca_source = "data:text/plain;charset=utf-8;base64," + base64.b64encode(
        root_ca
    ).decode()
    config: dict[str, Any] = {
        "ignition": {
            "version": IGNITION_VERSION,
            "config": {"append": [{"source": source, "verification": {}}]},
            "security": {
                "tls": {
                    "certificateAuthorities": [{"source": ca_source, "verification": {}}]
                }
            },
        },
    }
    if ssh_key:
        config["passwd"] = {
            "users": [{"name": CORE_USER, "sshAuthorizedKeys": [ssh_key]}]
        }
    return config


class WorkerIgnition(WritableAsset):
    """The ignition pointer config for worker machines."""

    def __init__(self, data: bytes | None = None) -> None:
        """Initialize the asset, optionally with an existing ignition config."""
        self._data = data

    def name(self) -> str:
        return "Worker Ignition Config"

    def dependencies(self) -> list[type[Asset]]:
        return [InstallConfig, RootCA]

    def generate(self, parents: Parents) -> None:
        config = parents.get(InstallConfig).config
        root_ca = parents.get(RootCA)
        ignition = pointer_ignition_config(
            config.api_host, "worker", root_ca.cert(), config.ssh_key
        )
        _LOGGER.debug("Generated worker ignition pointing to %s", config.api_host)
        self._data = json.dumps(ignition, sort_keys=True).encode()

    def files(self) -> list[GeneratedFile]:
        return [GeneratedFile("worker.ign", self._require(self._data))]
