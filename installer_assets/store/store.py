"""Store module for holding generated assets during a pass."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Any, TypeVar

from installer_assets.asset import Asset

T = TypeVar("T", bound=Asset)


class Status(StrEnum):
    """Generation status for an asset type."""

    PENDING = "Pending"
    READY = "Ready"
    FAILED = "Failed"


@dataclass
class StatusInfo:
    """Generation status and optional error message for an asset type."""

    status: Status
    error: str | None = None

    def __str__(self) -> str:
        if self.error:
            return f"{self.status}: {self.error}"
        return str(self.status)


class StoreEvent(str, Enum):
    """Enum for store events."""

    ASSET_ADDED = "asset_added"
    STATUS_UPDATED = "status_updated"


class AssetStore(ABC):
    """Abstract base class for the registry of assets keyed by asset type."""

    @abstractmethod
    def add_asset(self, asset: Asset) -> None:
        """Add a generated asset to the store and mark its type ready.

        Adding an asset before a pass starts seeds it: the resolver will use
        the instance as is and never call its generate step.
        """

    @abstractmethod
    def get_asset(self, asset_type: type[T]) -> T | None:
        """Retrieve the generated asset of the given type."""

    @abstractmethod
    def update_status(
        self, asset_type: type[Asset], status: Status, error: str | None = None
    ) -> None:
        """Update the generation status and optional error message for an asset type."""

    @abstractmethod
    def get_status(self, asset_type: type[Asset]) -> StatusInfo | None:
        """Retrieve the generation status for an asset type."""

    @abstractmethod
    def has_failed_assets(self) -> bool:
        """Check if any assets in the store have failed to generate.

        Returns:
            bool: True if any assets have a failed status, False otherwise.
        """

    @abstractmethod
    def list_assets(self) -> list[Asset]:
        """List all generated assets in the order they were added."""

    @abstractmethod
    def add_listener(
        self,
        event: StoreEvent,
        callback: Callable[[type[Asset], Any], None],
    ) -> Callable[[], None]:
        """Register a callback for a specific event (asset added, status updated).

        The callback receives the asset type and either the asset or its new
        StatusInfo. Returns a callable that can be called to remove the listener.
        """
