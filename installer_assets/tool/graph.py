"""Installer-assets graph action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
from typing import cast

from installer_assets.resolver import generation_order

from .format import GraphEntry, TableFormatter, YamlFormatter
from .targets import TARGETS, add_target_flag

_LOGGER = logging.getLogger(__name__)


class GraphAction:
    """Installer-assets graph action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "graph",
                help="Print the dependency graph of a target",
                description="""Print every asset a target depends on in the
                    order the assets are generated, along with their direct
                    dependencies. Nothing is generated.""",
            ),
        )
        add_target_flag(args)
        args.add_argument(
            "--output",
            "-o",
            choices=["table", "yaml"],
            default="table",
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        target: str,
        output: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        entries = [
            GraphEntry.from_asset_type(asset_type)
            for asset_type in generation_order(TARGETS[target])
        ]
        _LOGGER.debug("Target %s has %d assets", target, len(entries))
        if output == "yaml":
            YamlFormatter().print(entries)
        else:
            TableFormatter().print(entries)
