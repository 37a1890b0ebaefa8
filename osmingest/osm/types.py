from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime

ANONYMOUS = "anonymous"

OsmTags = Mapping[str, str]


@dataclass(frozen=True)
class OsmMeta:
    """Attributes shared by every OSM element."""

    id: int
    user: str
    uid: str
    changeset: int
    version: int
    timestamp: datetime
    visible: bool


@dataclass(frozen=True)
class OsmData:
    meta: OsmMeta
    tags: OsmTags


@dataclass(frozen=True)
class OsmPoint:
    """Some point in the world, e.g. a location or a small object like a bench."""

    lat: float
    lon: float
    data: OsmData

    @property
    def id(self) -> int:
        return self.data.meta.id

    @property
    def tags(self) -> OsmTags:
        return self.data.tags


@dataclass(frozen=True)
class OsmWay:
    """A string of point ids.

    Open ways are roads, rivers and the like. Closed ways are buildings,
    water bodies and other areas, unless they are highways or barriers
    that are not explicitly tagged as areas.
    """

    nodes: tuple[int, ...]
    data: OsmData

    @property
    def id(self) -> int:
        return self.data.meta.id

    @property
    def tags(self) -> OsmTags:
        return self.data.tags

    @property
    def is_closed(self) -> bool:
        if not self.nodes:
            return False
        return self.nodes[0] == self.nodes[-1]

    @property
    def is_area(self) -> bool:
        return self.data.tags.get("area") == "yes"

    @property
    def is_highway_or_barrier(self) -> bool:
        return "highway" in self.data.tags or "barrier" in self.data.tags

    @property
    def is_line(self) -> bool:
        return not self.is_closed or (not self.is_area and self.is_highway_or_barrier)


@dataclass(frozen=True)
class OsmMember:
    type: str
    ref: int
    role: str


@dataclass(frozen=True)
class OsmRelation:
    members: tuple[OsmMember, ...]
    data: OsmData

    @property
    def id(self) -> int:
        return self.data.meta.id

    @property
    def tags(self) -> OsmTags:
        return self.data.tags

    @property
    def subrelations(self) -> tuple[int, ...]:
        """Ids of the relations this relation points to, in member order."""
        return tuple(member.ref for member in self.members if member.type == "relation")


OsmElement = OsmPoint | OsmWay | OsmRelation


@dataclass
class ParsedElements:
    points: list[OsmPoint] = field(default_factory=list)
    ways: list[OsmWay] = field(default_factory=list)
    relations: list[OsmRelation] = field(default_factory=list)

    def add(self, element: OsmElement) -> None:
        match element:
            case OsmPoint():
                self.points.append(element)
            case OsmWay():
                self.ways.append(element)
            case OsmRelation():
                self.relations.append(element)
