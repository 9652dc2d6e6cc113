"""Rendering of parameterized manifest templates.

Templates are jinja2 bodies rendered with strict undefined handling: every
field a template references must be present in the data record, otherwise
rendering fails instead of emitting an empty value.
"""

from collections.abc import Mapping
import dataclasses
from dataclasses import dataclass
import logging
from typing import Any

import jinja2
from jinja2 import meta

from .exceptions import RenderError

__all__ = [
    "Template",
    "TemplateRenderer",
]

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Template:
    """A named parameterized text template."""

    name: str
    """Identifier for the template used in errors."""

    body: str
    """The jinja2 template source."""


class TemplateRenderer:
    """Renders templates against a flat record of substitution values."""

    def __init__(self) -> None:
        """Initialize TemplateRenderer."""
        self._env = jinja2.Environment(
            undefined=jinja2.StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._compiled: dict[Template, jinja2.Template] = {}

    def _compile(self, template: Template) -> jinja2.Template:
        if (compiled := self._compiled.get(template)) is None:
            try:
                compiled = self._env.from_string(template.body)
            except jinja2.TemplateSyntaxError as err:
                raise RenderError(
                    template.name, f"malformed template at line {err.lineno}: {err}"
                ) from err
            self._compiled[template] = compiled
        return compiled

    def render(self, template: Template, data: Mapping[str, Any] | Any) -> bytes:
        """Render the template against the data record.

        The data record may be a mapping or a dataclass instance.

        Raises:
            RenderError: If the template is malformed or references a field
                missing from the data record.
        """
        if dataclasses.is_dataclass(data) and not isinstance(data, type):
            context = dataclasses.asdict(data)
        else:
            context = dict(data)
        compiled = self._compile(template)
        _LOGGER.debug("Rendering template %s", template.name)
        try:
            return compiled.render(context).encode()
        except jinja2.UndefinedError as err:
            raise RenderError(template.name, str(err)) from err

    def undeclared_fields(self, template: Template) -> set[str]:
        """Return the names of all data fields referenced by the template."""
        try:
            ast = self._env.parse(template.body)
        except jinja2.TemplateSyntaxError as err:
            raise RenderError(template.name, str(err)) from err
        return meta.find_undeclared_variables(ast)
