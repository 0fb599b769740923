"""Library - named templates available to each other as partials."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from stache.content_types import ContentTypes
from stache.exceptions import ParseError, TemplateLoadError
from stache.render.renderer import Renderer
from stache.template import Template
from stache.values import ValueAccessor

log = logging.getLogger(__name__)


class Library:
    """A set of templates keyed by name.

    Templates rendered through a library resolve `{{>name}}` partials
    against it. All templates registered as text share the library's
    content type registry, and all renders share its value accessor.

    Args:
        templates: Initial templates, as `Template` objects or source text.
        content_types: Registry for templates compiled by the library.
        accessor: Named-child lookup for host objects.
    """

    def __init__(
        self,
        templates: Optional[Mapping[str, Union[Template, str]]] = None,
        *,
        content_types: ContentTypes | None = None,
        accessor: ValueAccessor | None = None,
    ):
        self.content_types = content_types or ContentTypes()
        self.renderer = Renderer(self.content_types, accessor)
        self._templates: Dict[str, Template] = {}
        for name, template in (templates or {}).items():
            self.register(name, template)

    def register(self, name: str, template: Union[Template, str]) -> Template:
        """Add or replace a template, compiling it first if given as text."""
        if isinstance(template, str):
            template = Template(template, content_types=self.content_types)
        self._templates[name] = template
        return template

    def get(self, name: str) -> Optional[Template]:
        return self._templates.get(name)

    def names(self) -> List[str]:
        return sorted(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def render(self, value: Any, name: str) -> Optional[str]:
        """Render the template called `name`, or return None if there is none."""
        template = self.get(name)
        if template is None:
            return None
        return template.render(value, library=self)

    @classmethod
    def load(
        cls,
        directory: Union[str, Path],
        *,
        extension: str = "mustache",
        strict: bool = False,
        content_types: ContentTypes | None = None,
        accessor: ValueAccessor | None = None,
    ) -> "Library":
        """Load every template file below `directory`.

        Templates are named by their path relative to `directory`, with `/`
        separators and without the extension, so `mail/footer.mustache`
        becomes `mail/footer`.

        Args:
            directory: Root directory to search recursively.
            extension: File extension of template files, without the dot.
            strict: Raise on the first template that cannot be loaded instead
                of logging it and moving on.

        Raises:
            FileNotFoundError: If `directory` does not exist.
            TemplateLoadError: If `strict` is set and a template cannot be read
                or parsed.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Template directory not found: {directory}")

        library = cls(content_types=content_types, accessor=accessor)
        suffix = "." + extension.lstrip(".")
        for path in sorted(directory.rglob(f"*{suffix}")):
            if not path.is_file():
                continue
            name = path.relative_to(directory).as_posix()[: -len(suffix)]
            try:
                template = Template.from_file(path, content_types=library.content_types)
            except (ParseError, OSError, UnicodeDecodeError) as exc:
                error = TemplateLoadError(name + suffix, exc)
                if strict:
                    raise error from exc
                log.warning("Skipping template %s", error)
                continue
            library.register(name, template)
            log.debug("Loaded template %s from %s", name, path)

        log.info("Loaded %d templates from %s", len(library), directory)
        return library
