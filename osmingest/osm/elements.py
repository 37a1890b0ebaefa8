from __future__ import annotations

import os
import re
import xml.etree.ElementTree as ET
from collections.abc import Generator
from collections.abc import Iterator
from datetime import datetime
from logging import getLogger
from types import MappingProxyType
from typing import BinaryIO

from osmingest.osm.errors import MalformedValueError
from osmingest.osm.errors import MissingAttributeError
from osmingest.osm.errors import StreamError
from osmingest.osm.types import ANONYMOUS
from osmingest.osm.types import OsmData
from osmingest.osm.types import OsmElement
from osmingest.osm.types import OsmMember
from osmingest.osm.types import OsmMeta
from osmingest.osm.types import OsmPoint
from osmingest.osm.types import OsmRelation
from osmingest.osm.types import OsmWay
from osmingest.osm.types import ParsedElements

logger = getLogger("osmingest.osm")

XmlSource = str | os.PathLike[str] | BinaryIO

ROOT_TAG = "osm"
ELEMENT_TAGS = frozenset({"node", "way", "relation"})

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_TIMESTAMP = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}(:[0-9]{2}(\.[0-9]+)?)?(Z|[+-][0-9]{2}:[0-9]{2})"
)
_INT32 = (-(2**31), 2**31 - 1)
_INT64 = (-(2**63), 2**63 - 1)


class AttributeReader:
    """Reads and coerces the attributes of a single XML element."""

    def __init__(self, element: str, attrib: dict[str, str], element_id: str | None = None) -> None:
        self.element = element
        self.attrib = attrib
        self.element_id = element_id

    def mandatory(self, name: str) -> str:
        value = self.attrib.get(name)
        if value is None:
            raise MissingAttributeError(name, self.element, self.element_id)
        return value

    def optional(self, name: str, default: str) -> str:
        return self.attrib.get(name, default)

    def _malformed(self, name: str, value: str, expected: str) -> MalformedValueError:
        return MalformedValueError(name, value, expected, self.element, self.element_id)

    def _integer(self, name: str, bounds: tuple[int, int], expected: str) -> int:
        value = self.mandatory(name)
        if _INTEGER.fullmatch(value) is None:
            raise self._malformed(name, value, expected)
        number = int(value)
        low, high = bounds
        if not low <= number <= high:
            raise self._malformed(name, value, expected)
        return number

    def int32(self, name: str) -> int:
        return self._integer(name, _INT32, "32-bit integer")

    def int64(self, name: str) -> int:
        return self._integer(name, _INT64, "64-bit integer")

    def float64(self, name: str) -> float:
        value = self.mandatory(name)
        if _DECIMAL.fullmatch(value) is None:
            raise self._malformed(name, value, "number")
        return float(value)

    def timestamp(self, name: str) -> datetime:
        value = self.mandatory(name)
        if _TIMESTAMP.fullmatch(value) is None:
            raise self._malformed(name, value, "timestamp")
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise self._malformed(name, value, "timestamp") from None
        if parsed.tzinfo is None:
            raise self._malformed(name, value, "timestamp with time zone")
        return parsed

    def boolean(self, name: str) -> bool:
        value = self.mandatory(name)
        match value.lower():
            case "true":
                return True
            case "false":
                return False
            case _:
                raise self._malformed(name, value, "boolean")


class ElementScope:
    """Collects one top-level element and its children while the stream advances."""

    def __init__(self, tag: str, attrib: dict[str, str]) -> None:
        self.tag = tag
        self.attrib = attrib
        self.children: list[tuple[str, dict[str, str]]] = []

    def add_child(self, tag: str, attrib: dict[str, str]) -> None:
        self.children.append((tag, attrib))

    def _child_reader(self, tag: str, attrib: dict[str, str]) -> AttributeReader:
        return AttributeReader(f"{self.tag}/{tag}", attrib, self.attrib.get("id"))

    def decode_meta(self, attrs: AttributeReader) -> OsmMeta:
        return OsmMeta(
            id=attrs.int64("id"),
            user=attrs.optional("user", ANONYMOUS),
            uid=attrs.optional("uid", ANONYMOUS),
            changeset=attrs.int32("changeset"),
            version=attrs.int32("version"),
            timestamp=attrs.timestamp("timestamp"),
            visible=attrs.boolean("visible"),
        )

    def decode_data(self, attrs: AttributeReader) -> OsmData:
        meta = self.decode_meta(attrs)
        tags: dict[str, str] = {}
        for tag, attrib in self.children:
            if tag == "tag":
                child = self._child_reader(tag, attrib)
                key = child.mandatory("k")
                tags[key] = child.mandatory("v")
        return OsmData(meta=meta, tags=MappingProxyType(tags))

    def decode_point(self) -> OsmPoint:
        attrs = AttributeReader(self.tag, self.attrib, self.attrib.get("id"))
        lat = attrs.float64("lat")
        lon = attrs.float64("lon")
        return OsmPoint(lat=lat, lon=lon, data=self.decode_data(attrs))

    def decode_way(self) -> OsmWay:
        attrs = AttributeReader(self.tag, self.attrib, self.attrib.get("id"))
        nodes = tuple(
            self._child_reader(tag, attrib).int64("ref") for tag, attrib in self.children if tag == "nd"
        )
        return OsmWay(nodes=nodes, data=self.decode_data(attrs))

    def decode_member(self, attrib: dict[str, str]) -> OsmMember:
        child = self._child_reader("member", attrib)
        return OsmMember(
            type=child.mandatory("type"),
            ref=child.int64("ref"),
            role=child.mandatory("role"),
        )

    def decode_relation(self) -> OsmRelation:
        attrs = AttributeReader(self.tag, self.attrib, self.attrib.get("id"))
        members = tuple(self.decode_member(attrib) for tag, attrib in self.children if tag == "member")
        return OsmRelation(members=members, data=self.decode_data(attrs))

    def decode(self) -> OsmElement:
        match self.tag:
            case "node":
                return self.decode_point()
            case "way":
                return self.decode_way()
            case "relation":
                return self.decode_relation()
            case _:
                raise ValueError(f"Unknown element type: {self.tag}")


def read_events(source: BinaryIO) -> Generator[tuple[str, ET.Element], None, None]:
    try:
        yield from ET.iterparse(source, events=("start", "end"))
    except ET.ParseError as exc:
        raise StreamError(f"malformed XML: {exc}") from exc
    except (OSError, EOFError, ValueError) as exc:
        raise StreamError(f"input stream failed: {exc}") from exc


def decode_stream(source: BinaryIO) -> Generator[OsmElement, None, None]:
    depth = 0
    root: ET.Element | None = None
    root_tag = ""
    scope: ElementScope | None = None
    skipped: set[str] = set()

    for event, elem in read_events(source):
        if event == "start":
            depth += 1
            if depth == 1:
                root, root_tag = elem, elem.tag
                if root_tag != ROOT_TAG:
                    logger.warning("Root element is <%s>, expected <%s>; no elements will be read", root_tag, ROOT_TAG)
            elif depth == 2 and root_tag == ROOT_TAG and elem.tag in ELEMENT_TAGS:
                scope = ElementScope(elem.tag, dict(elem.attrib))
            elif depth == 3 and scope is not None:
                scope.add_child(elem.tag, dict(elem.attrib))
            continue

        depth -= 1
        if depth != 1:
            continue

        if scope is not None:
            element = scope.decode()
            scope = None
            yield element
        elif elem.tag not in skipped:
            skipped.add(elem.tag)
            logger.debug("Skipping <%s> elements", elem.tag)

        # Drop the finished subtree so memory stays bounded on large extracts.
        root.clear()


def iter_elements(source: XmlSource) -> Iterator[OsmElement]:
    """Lazily yield the elements of an OSM XML document in document order.

    `source` is a filesystem path or an open binary file object. Parsing stops
    with an `OsmParseError` at the first malformed element.
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as fin:
            yield from decode_stream(fin)
    else:
        yield from decode_stream(source)


def parse_elements(source: XmlSource) -> ParsedElements:
    """Parse a whole OSM XML document into points, ways and relations.

    Either every element parses or an `OsmParseError` is raised; no partial
    result is returned.
    """
    parsed = ParsedElements()
    for element in iter_elements(source):
        parsed.add(element)
    return parsed
