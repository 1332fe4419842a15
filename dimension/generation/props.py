"""Decorative prop selection and the optional prop registry collaborator.

The registry is only consulted when the profile's own pool is empty. A registry
JSON file looks like::

    {"props": [{"id": "Tree", "display_name": "Old Oak"}, {"id": "", "display_name": "Stump"}]}

A bare list of such objects is accepted too.
"""
from __future__ import annotations

import json
import os
import random
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .errors import RegistryError
from .profile import GenerationProfile
from .tiles import FALLBACK_PROP_ID


@dataclass(frozen=True)
class PropDefinition:
    id: str = ""
    display_name: str = ""

    @property
    def key(self) -> str:
        """Id, or the display name when the id is blank."""
        return (self.id or "").strip() or (self.display_name or "").strip()


class PropRegistry:
    def __init__(self, props: Optional[Iterable[Optional[PropDefinition]]] = None):
        self.props: Tuple[PropDefinition, ...] = tuple(p for p in (props or ()) if p is not None)

    def __len__(self) -> int:
        return len(self.props)

    def find(self, key: str) -> Optional[PropDefinition]:
        """First prop whose id or display name matches `key`, case-insensitively."""
        if not key or not key.strip():
            return None
        wanted = key.strip().casefold()
        for prop in self.props:
            if (prop.id or "").strip().casefold() == wanted:
                return prop
            if (prop.display_name or "").strip().casefold() == wanted:
                return prop
        return None

    def fallback_ids(self) -> List[str]:
        return _dedupe(p.key for p in self.props)

    @classmethod
    def from_dict(cls, data: Any) -> "PropRegistry":
        if isinstance(data, dict):
            entries = data.get("props")
        else:
            entries = data
        if not isinstance(entries, list):
            raise RegistryError("prop registry must be a list or an object with a 'props' list")
        props = []
        for i, entry in enumerate(entries):
            if isinstance(entry, str):
                props.append(PropDefinition(id=entry))
                continue
            if not isinstance(entry, dict):
                raise RegistryError(f"prop registry entry {i} must be an object or a string")
            pid = entry.get("id") or ""
            name = entry.get("display_name", entry.get("name")) or ""
            if not isinstance(pid, str) or not isinstance(name, str):
                raise RegistryError(f"prop registry entry {i} has non-string id/display_name")
            props.append(PropDefinition(id=pid, display_name=name))
        return cls(props)


def load_registry(path: str) -> PropRegistry:
    if not os.path.isfile(path):
        raise RegistryError(f"prop registry file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RegistryError(f"cannot load prop registry '{path}': {e}") from e
    return PropRegistry.from_dict(data)


def _dedupe(values: Iterable[Optional[str]]) -> List[str]:
    # trimmed, blanks dropped, first spelling kept on case-insensitive duplicates
    seen = set()
    out: List[str] = []
    for v in values:
        s = (v or "").strip()
        if not s:
            continue
        folded = s.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        out.append(s)
    return out


def resolve_prop_pool(profile: GenerationProfile, registry: Optional[PropRegistry] = None) -> List[str]:
    pool = _dedupe(profile.random_prop_pool)
    if not pool and registry is not None:
        pool = registry.fallback_ids()
    if not pool:
        pool = [FALLBACK_PROP_ID]
    return pool


def pick_prop(rng: random.Random, pool: Sequence[str]) -> str:
    if not pool:
        return FALLBACK_PROP_ID
    return pool[rng.randrange(len(pool))]


__all__ = [
    "PropDefinition",
    "PropRegistry",
    "load_registry",
    "resolve_prop_pool",
    "pick_prop",
]
