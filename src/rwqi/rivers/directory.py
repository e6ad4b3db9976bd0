"""
River Directory

Loads the river registry and resolves free-text river names against it.

The registry is an ordered list of records:
    {"id": "ganga", "name": "Ganga", "aliases": ["Ganges"], "dataset_ids": ["<resource id>"]}

stored as JSON (.json) or YAML (.yaml/.yml). It is read fresh on every
resolution so edits take effect without a restart. A missing or malformed
file is treated as an empty registry.

Resolution tiers (first match in registry order wins at each tier):
1. Exact id or name (case-insensitive)
2. Exact alias (case-insensitive)
3. Query is a substring of the name or of any alias
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class River(BaseModel):
    """A river registry record."""

    id: str = Field(..., min_length=1, description="Stable identifier, unique case-insensitively")
    name: str = Field(..., min_length=1, description="Display name")
    aliases: Tuple[str, ...] = Field(default=(), description="Alternative names")
    dataset_ids: Tuple[str, ...] = Field(default=(), description="Upstream resource ids, in priority order")

    model_config = {"frozen": True}

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("aliases", "dataset_ids", mode="before")
    @classmethod
    def coerce_strings(cls, value):
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            return tuple(str(v) for v in value if v is not None)
        return value

    @property
    def key(self) -> str:
        """Case-folded id used for comparisons and cache keys."""
        return self.id.lower()


def load_rivers(rivers_file: Path) -> List[River]:
    """
    Load the river registry.

    Args:
        rivers_file: Path to the registry (.json, .yaml or .yml)

    Returns:
        Rivers in registry order. Empty if the file is missing or unreadable.
        Individual malformed records are skipped. When two records share an id
        (case-insensitively) the first one is kept.
    """
    try:
        with open(rivers_file, 'r', encoding='utf-8') as f:
            if rivers_file.suffix.lower() in (".yaml", ".yml"):
                raw = yaml.safe_load(f)
            else:
                raw = json.load(f)
    except FileNotFoundError:
        logger.warning(f"River registry not found: {rivers_file}")
        return []
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        logger.warning(f"Could not read river registry {rivers_file}: {e}")
        return []

    if not isinstance(raw, list):
        logger.warning(f"River registry {rivers_file} is not a list, ignoring")
        return []

    rivers: List[River] = []
    seen = set()
    for i, entry in enumerate(raw):
        try:
            river = River.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Skipping malformed river record #{i}: {e}")
            continue

        if river.key in seen:
            logger.warning(f"Skipping duplicate river id: {river.id}")
            continue
        seen.add(river.key)
        rivers.append(river)

    return rivers


def find_river(query: str, rivers: List[River]) -> Optional[River]:
    """
    Resolve a free-text query against a list of rivers.

    Args:
        query: River name as typed by the user
        rivers: Registry in priority order

    Returns:
        Matching River or None

    Examples:
        >>> rivers = [River(id='ganga', name='Ganga', aliases=['Ganges'])]
        >>> find_river('GANGES', rivers).id
        'ganga'
        >>> find_river('gan', rivers).id
        'ganga'
    """
    q = query.strip().lower()
    if not q:
        return None

    # Tier 1: exact id or name
    for river in rivers:
        if river.key == q or river.name.lower() == q:
            return river

    # Tier 2: exact alias
    for river in rivers:
        if any(alias.lower() == q for alias in river.aliases):
            return river

    # Tier 3: substring of name or alias
    for river in rivers:
        if q in river.name.lower() or any(q in alias.lower() for alias in river.aliases):
            return river

    return None


class RiverDirectory:
    """Resolves river names against the registry file."""

    def __init__(self, rivers_file: Path):
        self.rivers_file = Path(rivers_file)

    def list_rivers(self) -> List[River]:
        return load_rivers(self.rivers_file)

    def resolve(self, query: str) -> Optional[River]:
        """Resolve a query using a fresh read of the registry."""
        river = find_river(query, self.list_rivers())
        if river is None:
            logger.info(f"No river matches query '{query}'")
        return river
