"""The install config asset describing the cluster to be created.

The install config is the root input of the asset graph. It is read from a
YAML file before a pass starts and seeded into the store, e.g.

```yaml
clusterID: 9d1bd1d8-2a5e-4c4e-b1c7-5c3f2b5d6e1a
metadata:
  name: demo
baseDomain: example.com
pullSecret: '{"auths": {}}'
```
"""

from dataclasses import dataclass, field
import ipaddress
import logging
from pathlib import Path
from typing import Any

import aiofiles
import yaml
from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig
from mashumaro.exceptions import InvalidFieldValue, MissingField

from .asset import Asset, GeneratedFile, Parents, WritableAsset
from .exceptions import InputException

__all__ = [
    "InstallConfig",
    "InstallConfigSpec",
    "load_install_config",
]

_LOGGER = logging.getLogger(__name__)

INSTALL_CONFIG_FILENAME = "install-config.yml"
API_PORT = 6443
DEFAULT_SERVICE_CIDR = "10.3.0.0/16"
DEFAULT_POD_CIDR = "10.2.0.0/16"
DEFAULT_NETWORK_TYPE = "flannel"
MASTER_POOL = "master"
WORKER_POOL = "worker"


@dataclass
class ClusterMetadata(DataClassDictMixin):
    """Metadata about the cluster."""

    name: str
    """The name of the cluster, used as a prefix for host names."""


@dataclass
class Networking(DataClassDictMixin):
    """Network layout of the cluster."""

    type: str = DEFAULT_NETWORK_TYPE
    """The network plugin to deploy."""

    service_cidr: str = field(
        metadata=field_options(alias="serviceCIDR"), default=DEFAULT_SERVICE_CIDR
    )
    """The address range for service IPs."""

    pod_cidr: str = field(
        metadata=field_options(alias="podCIDR"), default=DEFAULT_POD_CIDR
    )
    """The address range for pod IPs."""

    class Config(BaseConfig):
        serialize_by_alias = True


@dataclass
class MachinePool(DataClassDictMixin):
    """A named group of machines."""

    name: str
    """The name of the pool, e.g. master or worker."""

    replicas: int = 1
    """The number of machines in the pool."""


@dataclass
class InstallConfigSpec(DataClassDictMixin):
    """The user supplied configuration for the cluster to install."""

    metadata: ClusterMetadata

    cluster_id: str = field(metadata=field_options(alias="clusterID"))
    """Unique identifier of the cluster."""

    base_domain: str = field(metadata=field_options(alias="baseDomain"))
    """The DNS domain under which cluster host names are created."""

    pull_secret: str = field(metadata=field_options(alias="pullSecret"))
    """The secret used to pull container images."""

    ssh_key: str | None = field(metadata=field_options(alias="sshKey"), default=None)
    """The public key authorized to log in to the machines."""

    networking: Networking = field(default_factory=Networking)

    machines: list[MachinePool] = field(
        default_factory=lambda: [
            MachinePool(name=MASTER_POOL, replicas=1),
            MachinePool(name=WORKER_POOL, replicas=1),
        ]
    )

    platform: dict[str, Any] | None = None
    """Platform specific settings passed through unchanged."""

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True

    @property
    def cluster_name(self) -> str:
        """The name of the cluster."""
        return self.metadata.name

    @property
    def api_host(self) -> str:
        """The host name of the kubernetes API server."""
        return f"{self.cluster_name}-api.{self.base_domain}"

    @property
    def api_url(self) -> str:
        """The URL of the kubernetes API server."""
        return f"https://{self.api_host}:{API_PORT}"

    @property
    def service_ip(self) -> str:
        """The cluster IP of the kubernetes API service, first in the service range."""
        network = ipaddress.ip_network(self.networking.service_cidr)
        return str(network[1])

    @property
    def platform_name(self) -> str:
        """The name of the target platform, e.g. aws or libvirt."""
        if not self.platform:
            return "none"
        return next(iter(self.platform))

    def replicas(self, pool: str) -> int:
        """Return the number of machines in the named pool, or zero."""
        for machine_pool in self.machines:
            if machine_pool.name == pool:
                return machine_pool.replicas
        return 0

    def validate(self) -> None:
        """Check the values that every downstream asset relies on."""
        if not self.cluster_id:
            raise InputException("Install config is missing clusterID")
        if not self.metadata.name:
            raise InputException("Install config is missing metadata.name")
        if not self.base_domain:
            raise InputException("Install config is missing baseDomain")
        if not self.pull_secret:
            raise InputException("Install config is missing pullSecret")
        for cidr in (self.networking.service_cidr, self.networking.pod_cidr):
            try:
                ipaddress.ip_network(cidr)
            except ValueError as err:
                raise InputException(f"Install config has invalid CIDR {cidr}") from err

    @classmethod
    def parse_yaml(cls, content: str) -> "InstallConfigSpec":
        """Parse and validate a serialized install config."""
        try:
            doc = yaml.safe_load(content)
        except yaml.YAMLError as err:
            raise InputException(f"Install config is not valid YAML: {err}") from err
        if not isinstance(doc, dict):
            raise InputException(f"Install config must be a mapping, got: {doc!r}")
        try:
            spec = cls.from_dict(doc)
        except (MissingField, InvalidFieldValue) as err:
            raise InputException(f"Invalid install config: {err}") from err
        spec.validate()
        return spec

    def yaml(self) -> str:
        """Return a YAML string representation of the install config."""
        return yaml.dump(self.to_dict(), sort_keys=False)


class InstallConfig(WritableAsset):
    """Asset holding the install config for the pass."""

    def __init__(self, config: InstallConfigSpec | None = None) -> None:
        """Initialize InstallConfig with an optional already loaded config."""
        self._config = config

    def name(self) -> str:
        return "Install Config"

    def dependencies(self) -> list[type[Asset]]:
        return []

    def generate(self, parents: Parents) -> None:
        """Validate the install config.

        The install config is read from disk rather than computed, so an
        instance without a loaded config cannot be generated.
        """
        if self._config is None:
            raise InputException(
                "No install config was loaded; an install config file is required"
            )
        self._config.validate()

    @property
    def config(self) -> InstallConfigSpec:
        """The loaded install config."""
        return self._require(self._config)

    def files(self) -> list[GeneratedFile]:
        return [GeneratedFile(INSTALL_CONFIG_FILENAME, self.config.yaml().encode())]


async def load_install_config(path: Path) -> InstallConfig:
    """Read an install config file and return it as a generated asset."""
    _LOGGER.debug("Loading install config from %s", path)
    try:
        async with aiofiles.open(str(path)) as config_file:
            content = await config_file.read()
    except FileNotFoundError as err:
        raise InputException(f"Install config file {path} does not exist") from err
    if not content:
        raise InputException(f"Install config file {path} is empty")
    return InstallConfig(InstallConfigSpec.parse_yaml(content))
