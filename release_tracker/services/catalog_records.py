"""
Typed records parsed from catalog API responses.

The catalog nests most values one or two levels deep (``genres: [{name}]``,
``platforms: [{platform: {name}}]``, ``developers: [{name}]``); these
parsers flatten them into plain dataclasses and ignore every field they do not
know about. A response that does not have the expected shape raises
``CatalogTransportError``.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Set

from release_tracker.exceptions import CatalogTransportError


def _parse_date(value) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise CatalogTransportError(f"Invalid release date: {value!r}")


def _parse_datetime(value) -> Optional[datetime]:
    """Catalog timestamps are UTC without offset, e.g. 2024-05-10T12:34:56"""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise CatalogTransportError(f"Invalid timestamp: {value!r}")
    return parsed


def _names(items, *path) -> Optional[Set[str]]:
    """Collect item[path...] for each item, or None when the list itself is absent"""
    if items is None:
        return None
    if not isinstance(items, list):
        raise CatalogTransportError(f"Expected a list, got {type(items).__name__}")
    names = set()
    for item in items:
        value = item
        for key in path:
            value = value.get(key) if isinstance(value, dict) else None
        if value:
            names.add(value)
    return names


def _first_name(items) -> Optional[str]:
    if items is None:
        return None
    if not isinstance(items, list):
        raise CatalogTransportError(f"Expected a list of names, got {type(items).__name__}")
    if items and isinstance(items[0], dict):
        return items[0].get("name")
    return None


@dataclass
class CatalogGameRecord:
    slug: str
    title: str
    released: Optional[date]
    updated: Optional[datetime]
    genres: Optional[Set[str]] = None
    platforms: Optional[Set[str]] = None
    tags: Set[str] = field(default_factory=set)
    background_image: Optional[str] = None
    esrb_rating: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict) -> "CatalogGameRecord":
        if not isinstance(data, dict) or not data.get("slug"):
            raise CatalogTransportError(f"Catalog game entry without slug: {data!r}")

        try:
            esrb = data.get("esrb_rating")
            return cls(
                slug=data["slug"],
                title=data.get("name") or data["slug"],
                released=_parse_date(data.get("released")),
                updated=_parse_datetime(data.get("updated")),
                genres=_names(data.get("genres"), "name"),
                platforms=_names(data.get("platforms"), "platform", "name"),
                # Tags are matched by slug, which is stable across display-name edits
                tags=_names(data.get("tags"), "slug") or set(),
                background_image=data.get("background_image"),
                esrb_rating=esrb.get("name") if isinstance(esrb, dict) else None,
            )
        except (AttributeError, TypeError) as e:
            raise CatalogTransportError(f"Malformed catalog entry for '{data.get('slug')}': {e}")


@dataclass
class CatalogPage:
    records: List[CatalogGameRecord]
    has_next: bool
    count: int = 0

    @classmethod
    def from_json(cls, data: Dict) -> "CatalogPage":
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise CatalogTransportError("Catalog games response has no results list")
        return cls(
            records=[CatalogGameRecord.from_json(item) for item in data["results"]],
            has_next=data.get("next") is not None,
            count=data.get("count") or 0,
        )


@dataclass
class GameDetail:
    description: Optional[str] = None
    developer: Optional[str] = None
    publisher: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict) -> "GameDetail":
        if not isinstance(data, dict):
            raise CatalogTransportError("Catalog game detail response is not an object")
        return cls(
            description=data.get("description_raw"),
            developer=_first_name(data.get("developers")),
            publisher=_first_name(data.get("publishers")),
        )


@dataclass
class StoreLink:
    store_id: int
    url: str

    @classmethod
    def from_json(cls, data: Dict) -> "StoreLink":
        try:
            return cls(store_id=int(data["store_id"]), url=data["url"])
        except (KeyError, TypeError, ValueError):
            raise CatalogTransportError(f"Malformed store link: {data!r}")


def parse_store_links(data: Dict) -> List[StoreLink]:
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise CatalogTransportError("Store links response has no results list")
    return [StoreLink.from_json(item) for item in data["results"] if isinstance(item, dict) and item.get("url")]


def parse_store_directory(data: Dict) -> Dict[int, str]:
    """Map of store id -> store display name"""
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise CatalogTransportError("Stores response has no results list")
    directory = {}
    for item in data["results"]:
        try:
            directory[int(item["id"])] = item["name"]
        except (KeyError, TypeError, ValueError):
            raise CatalogTransportError(f"Malformed store entry: {item!r}")
    return directory
