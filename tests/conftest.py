"""Shared fixtures for the test-suite."""
from datetime import datetime
from datetime import timezone

import pytest

from osmingest.osm.types import OsmData
from osmingest.osm.types import OsmMember
from osmingest.osm.types import OsmMeta
from osmingest.osm.types import OsmRelation
from osmingest.osm.types import OsmWay

SAMPLE_OSM = b"""<?xml version='1.0' encoding='UTF-8'?>
<osm version='0.6' generator='test'>
  <bounds minlat='49.5' minlon='6.0' maxlat='49.6' maxlon='6.1'/>
  <node id='1' lat='49.5135613' lon='6.0095049' user='alice' uid='42' changeset='100' version='2'
        timestamp='2015-07-09T10:04:57Z' visible='true'>
    <tag k='amenity' v='bench'/>
  </node>
  <node id='2' lat='49.514' lon='6.010' changeset='100' version='1'
        timestamp='2015-07-09T10:04:57Z' visible='true'/>
  <way id='10' changeset='101' version='3' timestamp='2016-01-01T00:00:00+01:00' visible='false'>
    <nd ref='1'/>
    <nd ref='2'/>
    <tag k='highway' v='footway'/>
    <tag k='highway' v='path'/>
  </way>
  <node id='3' lat='49.515' lon='6.011' changeset='102' version='1'
        timestamp='2015-07-09T10:04:57Z' visible='true'/>
  <relation id='20' changeset='103' version='1' timestamp='2017-05-05T05:05:05Z' visible='true'>
    <member type='way' ref='10' role='outer'/>
    <member type='relation' ref='21' role=''/>
    <tag k='type' v='multipolygon'/>
  </relation>
</osm>
"""


def make_meta(id: int = 1) -> OsmMeta:
    return OsmMeta(
        id=id,
        user="anonymous",
        uid="anonymous",
        changeset=1,
        version=1,
        timestamp=datetime(2020, 1, 1, tzinfo=timezone.utc),
        visible=True,
    )


def make_way(nodes, tags=None, id: int = 1) -> OsmWay:
    return OsmWay(nodes=tuple(nodes), data=OsmData(meta=make_meta(id), tags=tags or {}))


def make_relation(members, id: int = 1) -> OsmRelation:
    return OsmRelation(
        members=tuple(OsmMember(type=t, ref=r, role=role) for t, r, role in members),
        data=OsmData(meta=make_meta(id), tags={}),
    )


@pytest.fixture
def sample_osm() -> bytes:
    return SAMPLE_OSM


@pytest.fixture
def osm_file(tmp_path, sample_osm):
    path = tmp_path / "sample.osm"
    path.write_bytes(sample_osm)
    return path


@pytest.fixture
def chain_edges():
    return [
        (1, "a", [2, 4]),
        (2, "b", [3]),
        (3, "c", [6, 7]),
        (4, "d", [5]),
        (5, "e", [7]),
        (6, "f", []),
        (7, "g", []),
    ]


@pytest.fixture
def two_cluster_edges(chain_edges):
    return chain_edges + [
        (8, "h", [9, 10]),
        (9, "i", [10]),
        (10, "j", []),
    ]
