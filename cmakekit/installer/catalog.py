"""
Installable catalog for CMake versions.

The catalog is a JSON document published by the update center. Each entry
is one CMake version with one archive per platform::

    {
      "list": [
        {
          "id": "3.20.0",
          "name": "3.20.0",
          "variants": [
            {"os": "Linux", "arch": "x86_64",
             "url": "https://.../cmake-3.20.0-linux-x86_64.tar.gz"}
          ]
        }
      ]
    }

Field names and the raw ``os``/``arch`` strings are a published contract.
They are parsed against an explicit schema: unknown or malformed fields are
rejected rather than silently defaulted. Older catalogs spell the variant
fields ``os_cm`` and ``arch_cm``; those aliases are accepted.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from cmakekit.core.download import fetch_text
from cmakekit.core.exceptions import CatalogError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_URL = (
    "https://updates.jenkins.io/updates/hudson.plugins.cmake.CmakeInstaller.json"
)

_INSTALLABLE_FIELDS = {"id", "name", "url", "variants"}
_VARIANT_ALIASES = {"os": "os_cm", "arch": "arch_cm"}
_VARIANT_FIELDS = {"url", "os", "arch", "os_cm", "arch_cm"}


@dataclass(frozen=True)
class Variant:
    """One platform-specific archive of a CMake version."""

    os: str
    """OS name as spelled by the publisher (e.g. 'Linux', 'win32', 'Darwin')"""

    arch: str
    """Architecture as spelled by the publisher (e.g. 'x86_64', 'universal')"""

    url: str
    """Download URL of the archive"""


@dataclass(frozen=True)
class Installable:
    """One publishable CMake version and all of its platform variants."""

    id: str
    variants: Tuple[Variant, ...] = ()
    name: Optional[str] = None


def _require_str(value: Any, where: str, key: str, allow_empty: bool = False) -> str:
    if not isinstance(value, str):
        raise CatalogError(f"{where}: field '{key}' must be a string, got {type(value).__name__}")
    if not allow_empty and not value.strip():
        raise CatalogError(f"{where}: field '{key}' must not be empty")
    return value


def _check_fields(entry: Any, allowed: set, where: str) -> Dict[str, Any]:
    if not isinstance(entry, dict):
        raise CatalogError(f"{where}: expected an object, got {type(entry).__name__}")
    unknown = sorted(set(entry) - allowed)
    if unknown:
        raise CatalogError(f"{where}: unknown field '{unknown[0]}'")
    return entry


def parse_variant(entry: Any, where: str = "variant") -> Variant:
    """
    Parse one variant record.

    Raises:
        CatalogError: If the record does not follow the schema
    """
    entry = _check_fields(entry, _VARIANT_FIELDS, where)

    values = {}
    for key, alias in _VARIANT_ALIASES.items():
        if key in entry and alias in entry:
            raise CatalogError(f"{where}: both '{key}' and '{alias}' given")
        if key in entry:
            values[key] = _require_str(entry[key], where, key, allow_empty=True)
        elif alias in entry:
            values[key] = _require_str(entry[alias], where, alias, allow_empty=True)
        else:
            raise CatalogError(f"{where}: missing field '{key}'")

    if "url" not in entry:
        raise CatalogError(f"{where}: missing field 'url'")
    url = _require_str(entry["url"], where, "url")

    return Variant(os=values["os"], arch=values["arch"], url=url)


def parse_installable(entry: Any, where: str = "installable") -> Installable:
    """
    Parse one installable record.

    Raises:
        CatalogError: If the record does not follow the schema
    """
    entry = _check_fields(entry, _INSTALLABLE_FIELDS, where)

    if "id" not in entry:
        raise CatalogError(f"{where}: missing field 'id'")
    version_id = _require_str(entry["id"], where, "id")

    name = entry.get("name")
    if name is not None:
        name = _require_str(name, where, "name")
    if "url" in entry and entry["url"] is not None:
        _require_str(entry["url"], where, "url", allow_empty=True)

    if "variants" not in entry:
        raise CatalogError(f"{where}: missing field 'variants'")
    raw_variants = entry["variants"]
    if not isinstance(raw_variants, list):
        raise CatalogError(f"{where}: field 'variants' must be a list")

    variants = tuple(
        parse_variant(v, f"{where}.variants[{i}]") for i, v in enumerate(raw_variants)
    )
    return Installable(id=version_id, variants=variants, name=name)


def parse_catalog(data: Any) -> List[Installable]:
    """
    Parse a decoded catalog document.

    Args:
        data: Either ``{"list": [...]}`` (optionally signed) or a bare
            list of installables

    Returns:
        Installables in catalog order

    Raises:
        CatalogError: If the document does not follow the schema
    """
    if isinstance(data, dict):
        # published update-center files carry a "signature" object; not verified
        _check_fields(data, {"list", "signature"}, "catalog")
        if "list" not in data:
            raise CatalogError("catalog: missing field 'list'")
        entries = data["list"]
        where = "list"
    else:
        entries = data
        where = "catalog"

    if not isinstance(entries, list):
        raise CatalogError(f"{where}: expected a list, got {type(entries).__name__}")

    return [parse_installable(e, f"{where}[{i}]") for i, e in enumerate(entries)]


def load_catalog(source: Union[str, Path], timeout: int = 30) -> List[Installable]:
    """
    Load the catalog from a local file or an http(s) URL.

    Args:
        source: File path or URL
        timeout: Request timeout in seconds for URLs

    Returns:
        Installables in catalog order

    Raises:
        CatalogError: If the file is missing or the document is malformed
        TransportError: If the URL cannot be fetched
    """
    source_str = str(source)
    if source_str.startswith(("http://", "https://")):
        text = fetch_text(source_str, timeout=timeout)
    else:
        path = Path(source).expanduser()
        if not path.exists():
            raise CatalogError(f"Catalog file not found: {path}")
        text = path.read_text(encoding="utf-8")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in catalog {source_str}: {e}") from e

    catalog = parse_catalog(data)
    logger.debug(f"Loaded catalog with {len(catalog)} installables from {source_str}")
    return catalog


def find_installables(catalog: Sequence[Installable], version_id: str) -> List[Installable]:
    """All catalog entries with the given id, in catalog order."""
    return [inst for inst in catalog if inst.id == version_id]


def list_versions(catalog: Sequence[Installable]) -> List[str]:
    """Version ids in catalog order, without duplicates."""
    seen = {}
    for inst in catalog:
        seen.setdefault(inst.id, None)
    return list(seen)
