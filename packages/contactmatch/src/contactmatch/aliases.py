"""First-name alias groups for fuzzy name matching."""

from __future__ import annotations

import json
import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("CONTACTMATCH_CONFIG_DATA") or "config_data")

# Canonical first name -> common nicknames.
_BUILTIN_ALIASES: dict[str, list[str]] = {
    "william": ["will", "bill", "liam", "billy"],
    "elizabeth": ["liz", "beth", "betty", "bette"],
    "richard": ["rick", "rich", "dick", "ricky"],
    "robert": ["rob", "bob", "bert", "bobby"],
    "james": ["jim", "jimmy", "jamie"],
    "christopher": ["chris", "kit"],
    "jonathan": ["jon", "johnny"],
    "john": ["jon", "johnny"],
    "margaret": ["maggie", "marge", "peggy"],
    "benjamin": ["ben", "benji", "bennie"],
    "samuel": ["sam", "sammy"],
    "alexander": ["alex", "lex"],
    "andrew": ["andy", "drew"],
    "daniel": ["dan", "danny"],
    "david": ["dave", "davy"],
    "michael": ["mike", "mick"],
    "thomas": ["tom", "tommy"],
    "charles": ["charlie", "chuck"],
    "edward": ["ed", "eddie", "ted"],
    "joseph": ["joe", "joey"],
    "nicholas": ["nick", "nicky"],
    "jennifer": ["jen", "jenny"],
    "patricia": ["pat", "patty", "trish"],
    "katherine": ["kate", "katie", "kat"],
    "dorothy": ["dottie", "dot"],
    "susan": ["sue", "suzy"],
    "jessica": ["jess"],
    "sarah": ["sara"],
    "karen": ["kari"],
    "nancy": ["nan"],
}


def _load_extra_aliases() -> dict[str, list[str]]:
    """Load additional alias groups from name_aliases.json, if present."""
    path = DATA_DIR / "name_aliases.json"
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError:
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): [str(v) for v in vs] for k, vs in data.items() if isinstance(vs, list)}


def _build_groups(table: dict[str, list[str]]) -> tuple[frozenset[str], ...]:
    groups = []
    for primary, nicknames in table.items():
        variants = {primary.strip().lower()}
        variants.update(n.strip().lower() for n in nicknames)
        variants.discard("")
        groups.append(frozenset(variants))
    return tuple(groups)


ALIAS_GROUPS: tuple[frozenset[str], ...] = _build_groups(
    {**_BUILTIN_ALIASES, **_load_extra_aliases()}
)


def are_aliases(a: str, b: str) -> bool:
    """Check if two normalized first names belong to the same alias group.

    A nickname may belong to more than one group ("jon" is both John and
    Jonathan); the names only match if one group holds both.
    """
    if not a or not b:
        return False
    return any(a in group and b in group for group in ALIAS_GROUPS)
