"""Base classes for the nodes of the asset dependency graph.

An asset declares the assets it depends on and produces its own outputs once
all of them are generated. Assets are identified by their type: within a pass
there is a single instance of each asset type, shared by every dependent.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar, TYPE_CHECKING

from .exceptions import AssetNotGeneratedError, UndeclaredDependencyError

if TYPE_CHECKING:
    from .store import AssetStore

__all__ = [
    "Asset",
    "WritableAsset",
    "GeneratedFile",
    "Parents",
]

T = TypeVar("T", bound="Asset")
_V = TypeVar("_V")


@dataclass(frozen=True)
class GeneratedFile:
    """A file produced by an asset."""

    filename: str
    """Path of the file relative to the output directory."""

    data: bytes
    """Contents of the file."""


class Asset(ABC):
    """A node in the asset dependency graph."""

    @abstractmethod
    def name(self) -> str:
        """Return a human friendly name for the asset."""

    @abstractmethod
    def dependencies(self) -> list[type["Asset"]]:
        """Return the asset types that must be generated before this one.

        The list is static for the asset type and may be called before the
        asset is generated.
        """

    @abstractmethod
    def generate(self, parents: "Parents") -> None:
        """Generate the asset from its already generated dependencies."""

    def _require(self, value: _V | None) -> _V:
        """Return a generated output, failing if the asset was never generated."""
        if value is None:
            raise AssetNotGeneratedError(self.name())
        return value


class WritableAsset(Asset):
    """An asset that produces files."""

    @abstractmethod
    def files(self) -> list[GeneratedFile]:
        """Return the files generated by the asset."""


class Parents:
    """Read-only access to the generated dependencies of a single asset."""

    def __init__(
        self, store: "AssetStore", dependencies: Sequence[type[Asset]]
    ) -> None:
        """Initialize Parents."""
        self._store = store
        self._dependencies = frozenset(dependencies)

    def get(self, asset_type: type[T]) -> T:
        """Return the generated instance of a declared dependency."""
        if asset_type not in self._dependencies:
            raise UndeclaredDependencyError(asset_type.__name__)
        if (asset := self._store.get_asset(asset_type)) is None:
            raise AssetNotGeneratedError(asset_type.__name__)
        return asset
