from __future__ import annotations

from collections.abc import Generator
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import BinaryIO

import fsspec
from tqdm import tqdm

from osmingest.osm.elements import iter_elements
from osmingest.osm.types import OsmElement
from osmingest.osm.types import OsmPoint
from osmingest.osm.types import OsmRelation
from osmingest.osm.types import OsmWay
from osmingest.osm.types import ParsedElements

logger = getLogger("osmingest.osm")


@dataclass
class ReaderConfig:
    compression: str | None = "infer"
    progress: bool = False


@dataclass
class Stats:
    points: int = 0
    ways: int = 0
    relations: int = 0

    def update(self, element: OsmElement) -> None:
        match element:
            case OsmPoint():
                self.points += 1
            case OsmWay():
                self.ways += 1
            case OsmRelation():
                self.relations += 1


@contextmanager
def open_source(path: str, config: ReaderConfig) -> Generator[BinaryIO, None, None]:
    with fsspec.open(path, "rb", compression=config.compression) as fin:
        yield fin


def read_elements(path: str, config: ReaderConfig | None = None) -> Iterator[OsmElement]:
    config = config or ReaderConfig()
    with open_source(path, config) as fin:
        elements = iter_elements(fin)
        if config.progress:
            elements = tqdm(elements, desc="Reading elements", unit_scale=True)
        yield from elements


def parse_file(path: str, config: ReaderConfig | None = None) -> ParsedElements:
    logger.info("Parsing %s", path)
    parsed = ParsedElements()
    stats = Stats()
    for element in read_elements(path, config):
        parsed.add(element)
        stats.update(element)

    logger.info("Parsed %s: %s", path, stats)
    return parsed
