"""Module for in memory asset store."""

from collections import defaultdict
from collections.abc import Callable
import logging
from typing import Any, TypeVar, DefaultDict, cast

from installer_assets.asset import Asset

from .store import AssetStore, Status, StatusInfo, StoreEvent


_LOGGER = logging.getLogger(__name__)

T = TypeVar("T", bound=Asset)


class InMemoryAssetStore(AssetStore):
    """In-memory implementation of the AssetStore interface.

    Stores generated assets and their status keyed by asset type. Supports
    event listeners for asset and status changes.
    """

    def __init__(self) -> None:
        """Initialize the InMemoryAssetStore."""
        self._assets: dict[type[Asset], Asset] = {}
        self._status: dict[type[Asset], StatusInfo] = {}
        self._listeners: DefaultDict[StoreEvent, list[Callable[..., None]]] = (
            defaultdict(list)
        )

    def add_asset(self, asset: Asset) -> None:
        """Add a generated asset to the store and mark its type ready."""
        asset_type = type(asset)
        if (existing := self._assets.get(asset_type)) is not None:
            if existing is asset:
                _LOGGER.debug("Asset %s already exists in store, skipping", asset.name())
                return
            raise ValueError(
                f"Asset {asset.name()} already exists in store as a different instance"
            )
        _LOGGER.debug("Adding asset %s to store", asset.name())
        self._assets[asset_type] = asset
        self._fire_event(StoreEvent.ASSET_ADDED, asset_type, asset)
        self.update_status(asset_type, Status.READY)

    def get_asset(self, asset_type: type[T]) -> T | None:
        """Retrieve the generated asset of the given type."""
        # Keyed by exact type, so the stored instance is always a T
        return cast(T | None, self._assets.get(asset_type))

    def update_status(
        self, asset_type: type[Asset], status: Status, error: str | None = None
    ) -> None:
        """Update the generation status and optional error message for an asset type."""
        if status == Status.READY and asset_type not in self._assets:
            raise ValueError(
                f"Asset {asset_type.__name__} cannot be ready without a generated instance"
            )
        if status == Status.FAILED:
            _LOGGER.error(
                "Asset %s status %s with error: %s",
                asset_type.__name__,
                status,
                error,
            )
        else:
            _LOGGER.debug(
                "Updating status for asset %s to %s",
                asset_type.__name__,
                status,
            )
        self._status[asset_type] = StatusInfo(status=status, error=error)
        self._fire_event(StoreEvent.STATUS_UPDATED, asset_type, self._status[asset_type])

    def get_status(self, asset_type: type[Asset]) -> StatusInfo | None:
        """Retrieve the generation status for an asset type."""
        return self._status.get(asset_type)

    def has_failed_assets(self) -> bool:
        """Check if any assets in the store have failed to generate.

        Returns:
            bool: True if any assets have a failed status, False otherwise.
        """
        for status_info in self._status.values():
            if status_info.status == Status.FAILED:
                return True
        return False

    def list_assets(self) -> list[Asset]:
        """List all generated assets in the order they were added."""
        return list(self._assets.values())

    def add_listener(
        self,
        event: StoreEvent,
        callback: Callable[[type[Asset], Any], None],
    ) -> Callable[[], None]:
        """Register a callback for a specific event (asset added, status updated)."""

        def remove() -> None:
            if callback in self._listeners[event]:
                self._listeners[event].remove(callback)

        self._listeners[event].append(callback)
        return remove

    def _fire_event(self, event: StoreEvent, asset_type: type[Asset], value: Any) -> None:
        """Notify all listeners registered for the event."""
        for callback in list(self._listeners[event]):
            callback(asset_type, value)
