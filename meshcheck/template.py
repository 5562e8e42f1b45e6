"""Rendering manifest templates with helper functions and an image catalog."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import jinja2
import yaml


class TemplateError(Exception):
    """A template could not be parsed or rendered, or an image was not found."""


@dataclass(frozen=True)
class ImageCatalog:
    """Maps an image name and an architecture to a container image."""

    images: Mapping[str, Mapping[str, str]]
    arch: str
    path: str = ""

    @classmethod
    def load(cls, path, arch: str) -> ImageCatalog:
        """Read a YAML file of ``image -> (architecture -> container image)``."""
        try:
            text = Path(path).read_text()
        except OSError as exc:
            raise TemplateError(f"couldn't read file {path}: {exc}") from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise TemplateError(f"couldn't parse file {path}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict) or not all(
            isinstance(entry, dict) for entry in data.values()
        ):
            raise TemplateError(
                f"couldn't parse file {path}: expected a mapping of image names "
                "to architecture mappings"
            )
        images = {
            str(name): {str(a): str(image) for a, image in entry.items()}
            for name, entry in data.items()
        }
        return cls(images=images, arch=arch, path=str(path))

    def image(self, name: str) -> str:
        """Return the container image of ``name`` for this catalog's architecture."""
        by_arch = self.images.get(name)
        if by_arch is None:
            raise TemplateError(f"could not find image {name!r} in {self.path}")
        image = by_arch.get(self.arch)
        if image is None:
            raise TemplateError(
                f"could not find image {name!r} for architecture {self.arch!r} in {self.path}"
            )
        return image


def to_yaml(value: Any) -> str:
    """Serialise ``value`` as a YAML document with sorted keys."""
    try:
        text = yaml.safe_dump(value, default_flow_style=False, sort_keys=True, allow_unicode=True)
    except yaml.YAMLError as exc:
        raise TemplateError(f"Unable to marshal {value}") from exc
    if text.endswith("\n...\n"):
        text = text[: -len("...\n")]
    return text


def indent(spaces: int, source: str) -> str:
    """Prefix every line of ``source`` except the first with ``spaces`` spaces."""
    prefix = " " * abs(spaces)
    first, *rest = source.split("\n")
    return "\n".join([first, *(prefix + line for line in rest)])


def until(n: int) -> list[int]:
    """Return the integers ``0 .. n-1``."""
    if n < 0:
        raise ValueError(f"until requires a non-negative count: {n}")
    return list(range(n))


def add_line_numbers(text: str) -> str:
    """Return ``text`` with each line prefixed by its right-aligned line number."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    numbered = []
    for number, line in enumerate(lines, start=1):
        if line.endswith("\r"):
            line = line[:-1]
        numbered.append(f"{number:3d}: {line}\n")
    return "".join(numbered)


def _context(variables: Any) -> dict[str, Any]:
    if variables is None:
        return {}
    if isinstance(variables, Mapping):
        return {str(k): v for k, v in variables.items()}
    if dataclasses.is_dataclass(variables) and not isinstance(variables, type):
        return {f.name: getattr(variables, f.name) for f in dataclasses.fields(variables)}
    return {
        name: getattr(variables, name) for name in dir(variables) if not name.startswith("_")
    }


def _environment(images: Optional[ImageCatalog]) -> jinja2.Environment:
    env = jinja2.Environment(keep_trailing_newline=True, autoescape=False)

    def image(name: str) -> str:
        if images is None:
            raise TemplateError(f"no image catalog available to look up image {name!r}")
        return images.image(name)

    env.globals.update(toYaml=to_yaml, to_yaml=to_yaml, indent=indent, until=until, image=image)
    env.filters.update(toYaml=to_yaml, to_yaml=to_yaml)
    return env


def render(template: str, variables: Any = None, images: Optional[ImageCatalog] = None) -> str:
    """Render ``template`` with ``variables`` (a mapping or an object's attributes)."""
    env = _environment(images)
    try:
        compiled = env.from_string(template)
    except jinja2.TemplateSyntaxError as exc:
        raise TemplateError(
            f"could not execute template: {exc}:\n{add_line_numbers(template)}"
        ) from exc
    try:
        return compiled.render(_context(variables))
    except jinja2.TemplateError as exc:
        raise TemplateError(str(exc)) from exc