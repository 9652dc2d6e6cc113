"""Resolver for the asset dependency graph.

The resolver walks the declared dependencies of a requested asset depth
first, in declaration order, and generates every asset after all of its
dependencies. Each asset type is generated at most once per pass: the
generated instance is recorded in the store and handed to every dependent.

The dependency graph must be acyclic. Reaching an asset whose dependencies
are still being resolved is reported as a fatal `DependencyCycleError`.
"""

from collections.abc import Sequence
import logging
from typing import TypeVar

from .asset import Asset, Parents
from .context import generation_context, generation_path
from .exceptions import (
    AssetNotGeneratedError,
    DependencyCycleError,
    DependencyResolutionError,
    UndeclaredDependencyError,
)
from .store import AssetStore, InMemoryAssetStore, Status

__all__ = [
    "Resolver",
    "generation_order",
]

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T", bound=Asset)

# Raised unwrapped: these carry their own context or are programming errors
_PROPAGATED_ERRORS = (
    DependencyResolutionError,
    DependencyCycleError,
    AssetNotGeneratedError,
    UndeclaredDependencyError,
)


class Resolver:
    """Generates assets and their transitive dependencies for a single pass."""

    def __init__(self, store: AssetStore | None = None) -> None:
        """Initialize the resolver.

        Args:
            store: The registry for the pass. Assets already added to the
                store are treated as generated and are never regenerated.
        """
        self.store = store or InMemoryAssetStore()

    def resolve(self, asset_type: type[T]) -> T:
        """Generate the asset of the given type along with its dependencies.

        Returns the generated instance. Requesting an asset that was already
        generated in this pass returns the same instance without generating
        anything.

        Raises:
            DependencyResolutionError: If the asset or any of its transitive
                dependencies failed to generate.
            DependencyCycleError: If the declared dependencies contain a cycle.
            AssetNotGeneratedError, UndeclaredDependencyError: If an asset reads
                outputs it did not declare or that were never generated.
        """
        return self._resolve(asset_type, asset_type)

    def resolve_all(self, asset_types: Sequence[type[Asset]]) -> list[Asset]:
        """Generate several assets in one pass, returned in request order."""
        return [self.resolve(asset_type) for asset_type in asset_types]

    def _resolve(self, asset_type: type[T], root_type: type[Asset]) -> T:
        status = self.store.get_status(asset_type)
        if status is not None:
            if status.status == Status.READY:
                if (existing := self.store.get_asset(asset_type)) is None:
                    raise ValueError(f"Asset {asset_type.__name__} is ready but missing")
                return existing
            if status.status == Status.PENDING:
                name = _asset_name(asset_type)
                raise DependencyCycleError(name, generation_path() + [name])
            raise DependencyResolutionError(
                _asset_name(asset_type), _asset_name(root_type), status.error
            )

        asset = asset_type()
        with generation_context(asset.name()):
            self.store.update_status(asset_type, Status.PENDING)
            try:
                dependencies = asset.dependencies()
                for dependency in dependencies:
                    self._resolve(dependency, root_type)
                _LOGGER.debug("Generating asset %s", asset.name())
                asset.generate(Parents(self.store, dependencies))
            except _PROPAGATED_ERRORS as err:
                self.store.update_status(asset_type, Status.FAILED, str(err))
                raise
            except Exception as err:
                self.store.update_status(asset_type, Status.FAILED, str(err))
                raise DependencyResolutionError(
                    asset.name(), _asset_name(root_type), str(err)
                ) from err
            self.store.add_asset(asset)
        return asset


def _asset_name(asset_type: type[Asset]) -> str:
    """Return the human friendly name of an asset type."""
    return asset_type().name()


def generation_order(asset_types: Sequence[type[Asset]]) -> list[type[Asset]]:
    """Return the asset types in the order a resolver would generate them.

    Only the declared dependencies are inspected; nothing is generated.
    """
    order: list[type[Asset]] = []
    visiting: list[type[Asset]] = []

    def visit(asset_type: type[Asset]) -> None:
        if asset_type in order:
            return
        if asset_type in visiting:
            path = [_asset_name(t) for t in visiting + [asset_type]]
            raise DependencyCycleError(_asset_name(asset_type), path)
        visiting.append(asset_type)
        for dependency in asset_type().dependencies():
            visit(dependency)
        visiting.pop()
        order.append(asset_type)

    for asset_type in asset_types:
        visit(asset_type)
    return order
