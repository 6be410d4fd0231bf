"""Theme layout — YAML schema, struct tree and sequential color ids.

A layout file describes how theme colors are grouped into C++ structs::

    definitions:
      Backgrounds:
        fields: [regular, hover, unfocused]
    layout:
      tabs:
        fields:
          selected:
            fields:
              backgrounds: {ref: Backgrounds}
              text:

Every leaf field becomes one slot of the generated ``colors_`` array; ids
are handed out in sorted order of top-level items, depth first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import (
    CyclicRefError,
    EmptyStructError,
    LayoutSchemaError,
    NotStructError,
    RefAndFieldsError,
    RefNotFoundError,
)

logger = logging.getLogger(__name__)


# ── YAML schema ──────────────────────────────────────────────────


class YamlStruct(BaseModel):
    """One struct in the YAML file: either a ``ref`` or a ``fields`` body."""

    model_config = ConfigDict(extra="forbid")

    fields: Union[dict[str, Optional[YamlStruct]], list[str], None] = None
    ref: Optional[str] = None


YamlStruct.model_rebuild()


class YamlRootFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    definitions: dict[str, YamlStruct] = {}
    layout: dict[str, YamlStruct]


# ── layout tree ──────────────────────────────────────────────────


@dataclass
class RefItem:
    field_name: str
    referenced: str
    item_count: int


@dataclass
class FieldItem:
    name: str

    @property
    def item_count(self) -> int:
        return 1


@dataclass
class StructItem:
    field_name: str
    fields: list[LayoutItem] = field(default_factory=list)
    item_count: int = 0


LayoutItem = Union[RefItem, FieldItem, StructItem]


@dataclass
class LayoutDefinition:
    fields: list[LayoutItem]
    item_count: int


@dataclass
class FlatField:
    name: str
    id: int


@dataclass
class FlatStruct:
    name: str
    fields: list[FlatItem] = field(default_factory=list)


FlatItem = Union[FlatField, FlatStruct]


class Layout:
    """Parsed layout: reusable ``definitions`` plus top-level ``items``.

    Both maps are kept sorted by name so the generated code does not change
    when the YAML file is merely reordered.
    """

    def __init__(self):
        self.definitions: dict[str, LayoutDefinition] = {}
        self.items: dict[str, list[LayoutItem]] = {}

    @classmethod
    def parse(cls, source: str) -> Layout:
        try:
            raw = yaml.safe_load(source)
            root = YamlRootFile.model_validate(raw if raw is not None else {})
        except (yaml.YAMLError, ValidationError) as exc:
            raise LayoutSchemaError(str(exc)) from exc

        layout = cls()
        builder = _LayoutBuilder(layout, root.definitions)
        for name in sorted(root.definitions):
            builder.resolve_definition(name)

        for name in sorted(root.layout):
            converted = builder.convert_struct(name, root.layout[name])
            if not isinstance(converted, StructItem):
                raise NotStructError("Layout", name)
            layout.items[name] = converted.fields

        logger.debug(
            "Parsed layout: %d definitions, %d items, %d colors",
            len(layout.definitions),
            len(layout.items),
            layout.count_items(),
        )
        return layout

    def count_items(self) -> int:
        """Total number of leaf colors (the size of the color array)."""
        return sum(item.item_count for fields in self.items.values() for item in fields)

    def flatten(self) -> list[FlatStruct]:
        """Expand refs and assign every leaf field its sequential id."""
        next_id = 0

        def convert(name: str, items: list[LayoutItem]) -> FlatStruct:
            nonlocal next_id
            converted: list[FlatItem] = []
            for item in items:
                if isinstance(item, RefItem):
                    definition = self.definitions[item.referenced]
                    converted.append(convert(item.field_name, definition.fields))
                elif isinstance(item, FieldItem):
                    converted.append(FlatField(name=item.name, id=next_id))
                    next_id += 1
                else:
                    converted.append(convert(item.field_name, item.fields))
            return FlatStruct(name=name, fields=converted)

        return [convert(name, fields) for name, fields in self.items.items()]


class _LayoutBuilder:
    """Converts YAML structs into layout items, resolving refs on demand."""

    def __init__(self, layout: Layout, raw_definitions: dict[str, YamlStruct]):
        self._layout = layout
        self._raw = raw_definitions
        self._resolving: set[str] = set()

    def resolve_definition(self, name: str) -> LayoutDefinition:
        existing = self._layout.definitions.get(name)
        if existing is not None:
            return existing
        if name not in self._raw:
            raise RefNotFoundError(name)
        if name in self._resolving:
            raise CyclicRefError(name)

        self._resolving.add(name)
        converted = self.convert_struct(name, self._raw[name])
        self._resolving.discard(name)
        if not isinstance(converted, StructItem):
            raise NotStructError("Definition", name)

        definition = LayoutDefinition(
            fields=converted.fields, item_count=converted.item_count
        )
        self._layout.definitions[name] = definition
        return definition

    def convert_struct(self, name: str, struct: YamlStruct) -> LayoutItem:
        if struct.ref is not None and struct.fields is not None:
            raise RefAndFieldsError(name)
        if struct.ref is not None:
            definition = self.resolve_definition(struct.ref)
            return RefItem(
                field_name=name,
                referenced=struct.ref,
                item_count=definition.item_count,
            )
        if struct.fields is None:
            raise EmptyStructError(name)

        items: list[LayoutItem] = []
        if isinstance(struct.fields, list):
            items.extend(FieldItem(name=field_name) for field_name in struct.fields)
        else:
            for field_name in sorted(struct.fields):
                inner = struct.fields[field_name]
                if inner is None:
                    items.append(FieldItem(name=field_name))
                else:
                    items.append(self.convert_struct(field_name, inner))

        return StructItem(
            field_name=name,
            fields=items,
            item_count=sum(item.item_count for item in items),
        )
