from __future__ import annotations

import csv
import json
import logging
import threading
from pathlib import Path
from typing import Any

from metgen.models.metar import Airport

logger = logging.getLogger(__name__)


class AirportDirectory:
    """Read-only ICAO -> coordinates table loaded from a CSV file.

    The file may start with ``//`` comment lines; the first remaining row is a
    header (``ICAO,Latitude,Longitude``).
    """

    def __init__(self, airports: list[Airport]) -> None:
        self._by_icao = {a.icao.upper(): a for a in airports}

    @classmethod
    def from_csv(cls, path: Path) -> AirportDirectory:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Could not read airports file %s: %s", path, e)
            return cls([])
        return cls(parse_airports_csv(text))

    def __len__(self) -> int:
        return len(self._by_icao)

    def get(self, icao: str) -> Airport | None:
        return self._by_icao.get(icao.strip().upper())


def parse_airports_csv(text: str) -> list[Airport]:
    lines = [
        line
        for line in text.splitlines()
        if line.strip() and not line.lstrip().startswith("//")
    ]
    airports: list[Airport] = []
    for row in list(csv.reader(lines))[1:]:
        if len(row) < 3 or not row[0].strip():
            continue
        try:
            lat = float(row[1])
            lon = float(row[2])
        except ValueError:
            continue
        airports.append(Airport(icao=row[0].strip().upper(), latitude=lat, longitude=lon))
    return airports


class UserAirportStore:
    """Airports the user saved, kept in a small JSON document."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    def list_airports(self) -> list[Airport]:
        with self._lock:
            return self._read_airports(self._read())

    def get(self, icao: str) -> Airport | None:
        wanted = icao.strip().upper()
        for airport in self.list_airports():
            if airport.icao == wanted:
                return airport
        return None

    def save(self, airport: Airport) -> bool:
        """Add ``airport``; returns False if its ICAO code is already saved."""
        airport = Airport(
            icao=airport.icao.strip().upper(),
            latitude=airport.latitude,
            longitude=airport.longitude,
        )
        with self._lock:
            doc = self._read()
            airports = self._read_airports(doc)
            if any(a.icao == airport.icao for a in airports):
                return False
            airports.append(airport)
            self._write(doc, airports)
        logger.info("Saved user airport %s", airport.icao)
        return True

    def delete(self, icao: str) -> bool:
        wanted = icao.strip().upper()
        with self._lock:
            doc = self._read()
            airports = self._read_airports(doc)
            remaining = [a for a in airports if a.icao != wanted]
            if len(remaining) == len(airports):
                return False
            self._write(doc, remaining)
        logger.info("Deleted user airport %s", wanted)
        return True

    def _read(self) -> dict[str, Any]:
        try:
            doc = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable airport store %s: %s", self._path, e)
            return {}
        return doc if isinstance(doc, dict) else {}

    @staticmethod
    def _read_airports(doc: dict[str, Any]) -> list[Airport]:
        raw = doc.get("user_airports")
        if not isinstance(raw, list):
            return []
        airports: list[Airport] = []
        for entry in raw:
            if not isinstance(entry, dict):
                continue
            icao = entry.get("icao")
            try:
                lat = float(entry["latitude"])
                lon = float(entry["longitude"])
            except (KeyError, TypeError, ValueError):
                continue
            if isinstance(icao, str) and icao:
                airports.append(Airport(icao=icao.upper(), latitude=lat, longitude=lon))
        return airports

    def _write(self, doc: dict[str, Any], airports: list[Airport]) -> None:
        doc = dict(doc)
        doc["user_airports"] = [
            {"icao": a.icao, "latitude": a.latitude, "longitude": a.longitude}
            for a in airports
        ]
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(doc, indent=2), encoding="utf-8")
        tmp.replace(self._path)
