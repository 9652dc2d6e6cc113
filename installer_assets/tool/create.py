"""Installer-assets create action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import cast

from installer_assets.installconfig import load_install_config
from installer_assets.resolver import Resolver
from installer_assets.store import InMemoryAssetStore
from installer_assets.writer import write_assets

from .targets import TARGETS, add_target_flag

_LOGGER = logging.getLogger(__name__)


class CreateAction:
    """Installer-assets create action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "create",
                help="Generate a target and write its files to a directory",
                description="""Generate the assets of a target, along with
                    everything they depend on, from an install config and
                    write the resulting files under the output directory.""",
            ),
        )
        add_target_flag(args)
        args.add_argument(
            "--install-config",
            type=pathlib.Path,
            required=True,
            help="Path to the install config YAML file",
        )
        args.add_argument(
            "--dir",
            type=pathlib.Path,
            default=pathlib.Path("."),
            help="Directory the generated files are written to",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        target: str,
        install_config: pathlib.Path,
        dir: pathlib.Path,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = InMemoryAssetStore()
        store.add_asset(await load_install_config(install_config))

        resolver = Resolver(store)
        assets = [resolver.resolve(asset_type) for asset_type in TARGETS[target]]
        written = await write_assets(dir, assets)
        _LOGGER.info("Wrote %d files for target %s to %s", len(written), target, dir)
        for path in written:
            print(path)
