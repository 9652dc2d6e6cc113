"""Exceptions related to installer-assets."""

__all__ = [
    "AssetException",
    "InputException",
    "DependencyResolutionError",
    "DependencyCycleError",
    "CompositionError",
    "RenderError",
    "AssetNotGeneratedError",
    "UndeclaredDependencyError",
]


class AssetException(Exception):
    """Generic base exception used for this library."""


class InputException(AssetException):
    """Raised when the input files or values are not formatted as expected."""


class DependencyResolutionError(AssetException):
    """Raised when an asset could not be generated while resolving a request."""

    def __init__(self, asset_name: str, root_name: str, cause: str | None) -> None:
        super().__init__(
            f"Failed to generate asset {asset_name} (requested by {root_name}): "
            f"{cause or 'Unknown error'}"
        )
        self.asset_name = asset_name
        self.root_name = root_name
        self.cause = cause


class DependencyCycleError(AssetException):
    """Raised when an asset is reached again while its dependencies are resolving."""

    def __init__(self, asset_name: str, path: list[str]) -> None:
        super().__init__(
            f"Dependency cycle detected at asset {asset_name}: {' -> '.join(path)}"
        )
        self.asset_name = asset_name
        self.path = path


class CompositionError(AssetException):
    """Raised when an aggregate configuration record cannot be serialized."""


class RenderError(AssetException):
    """Raised when a template cannot be rendered against its data record."""

    def __init__(self, template_name: str, message: str) -> None:
        super().__init__(f"Failed to render template {template_name}: {message}")
        self.template_name = template_name


class AssetNotGeneratedError(RuntimeError):
    """Raised when the outputs of an asset are read before it was generated.

    This is an internal invariant breach caused by an incorrect dependency
    declaration, not a user error, so it is not an AssetException.
    """

    def __init__(self, asset_name: str) -> None:
        super().__init__(f"Asset {asset_name} has not been generated")
        self.asset_name = asset_name


class UndeclaredDependencyError(ValueError):
    """Raised when an asset reads a dependency it did not declare.

    Like `AssetNotGeneratedError` this is a programming error in the asset
    and is not an AssetException.
    """

    def __init__(self, asset_name: str) -> None:
        super().__init__(f"Asset {asset_name} is not a declared dependency")
        self.asset_name = asset_name
