import logging
import math
import pickle
from dataclasses import dataclass
from pathlib import Path

import networkx as nx

from airtsp.aco.geo import Coord

logger = logging.getLogger(__name__)

# node attribute names tried in order, as found in the airport graphs we consume
ICAO_KEYS = ("ICAO", "icao")
NAME_KEYS = ("Name", "name")
COORD_KEYS = (("Lat", "Lon"), ("latitude", "longitude"), ("lat", "lon"), ("y", "x"))

MISSING = (None, "", "\\N")


@dataclass(frozen=True)
class Airport:
    icao: str
    name: str
    coord: Coord


class AirportIndex:
    """Airports in a fixed order, addressable by ICAO code. Codes must be unique."""

    def __init__(self, airports):
        self.airports = list(airports)
        self.idx_by_icao = {}
        for i, apt in enumerate(self.airports):
            if apt.icao in self.idx_by_icao:
                raise ValueError(f"Duplicate ICAO code {apt.icao}")
            self.idx_by_icao[apt.icao] = i

    def __len__(self):
        return len(self.airports)

    def __iter__(self):
        return iter(self.airports)

    def __getitem__(self, i):
        return self.airports[i]

    def index_of(self, icao):
        return self.idx_by_icao[icao]

    @property
    def coords(self):
        return [apt.coord for apt in self.airports]

    def filtered(self, icaos):
        """Keep only airports whose code is in `icaos`, preserving order."""
        return AirportIndex(apt for apt in self.airports if apt.icao in icaos)


# ------------------ Loading ------------------
def load_graph(pkl_path):
    with open(pkl_path, "rb") as f:
        G = pickle.load(f)
    if not isinstance(G, nx.Graph):
        raise ValueError(f"{pkl_path} does not contain a networkx graph")
    # Convert to undirected (NetworkX preserves all attributes)
    if G.is_directed():
        G = G.to_undirected()
    return G


def _first(data, keys):
    for key in keys:
        value = data.get(key)
        if value not in MISSING:
            return value
    return None


def airport_from_node(node, data):
    """Airport for a graph node with degree coordinates, or None if it has no usable position."""
    coord = None
    for key_lat, key_lon in COORD_KEYS:
        if key_lat in data and key_lon in data:
            lat, lon = float(data[key_lat]), float(data[key_lon])
            if math.isfinite(lat) and math.isfinite(lon):
                coord = Coord.from_degrees(lat, lon)
            break
    if coord is None:
        return None
    icao = _first(data, ICAO_KEYS) or str(node)
    name = _first(data, NAME_KEYS) or icao
    return Airport(icao=str(icao), name=str(name), coord=coord)


def airports_from_graph(G):
    airports = []
    skipped = 0
    for node, data in G.nodes(data=True):
        apt = airport_from_node(node, data)
        if apt is None:
            skipped += 1
            continue
        airports.append(apt)
    if skipped:
        logger.warning("Skipped %d nodes without coordinates", skipped)
    return AirportIndex(airports)


def load_airports(pkl_path):
    return airports_from_graph(load_graph(pkl_path))


# ------------------ Filters & exceptions ------------------
def read_filter(path):
    """ICAO codes, one per line; lines that are not exactly four characters are ignored."""
    text = Path(path).read_text(encoding="utf-8")
    return {line.strip("\r").strip() for line in text.split("\n") if len(line.strip("\r").strip()) == 4}


def parse_excepts(pairs):
    """["EGLL-EGKK", ...] -> {"EGLL": {"EGKK"}, ...}"""
    excepts = {}
    for pair in pairs:
        a, sep, b = pair.strip().partition("-")
        if not sep or not a or not b:
            raise ValueError(f"Invalid format in except {pair!r}, expected ICAO-ICAO")
        excepts.setdefault(a, set()).add(b)
    return excepts


def exception_pairs(index, excepts):
    """Index pairs for the ICAO exceptions whose airports are both present."""
    pairs = set()
    for a, others in excepts.items():
        if a not in index.idx_by_icao:
            logger.warning("Exception airport %s not loaded", a)
            continue
        for b in others:
            if b not in index.idx_by_icao:
                logger.warning("Exception airport %s not loaded", b)
                continue
            if a != b:
                pairs.add((index.index_of(a), index.index_of(b)))
    return pairs
