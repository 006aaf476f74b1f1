"""Reaction map merge: stored emoji -> names, updated from a before/after snapshot."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional


def merge_reactions(
    stored: Optional[Mapping[str, list[str]]],
    old: Iterable[str],
    new: Iterable[str],
    actor_name: str,
) -> dict[str, list[str]]:
    """
    Apply one actor's reaction change to the stored map and return a new map.

    Emojis present in `old` but not in `new` lose the actor's name (the key is
    dropped when its list empties). Every emoji in `new` gains the actor's name
    once. Replaying the same snapshot leaves the map unchanged.
    """
    result = {emoji: list(names) for emoji, names in (stored or {}).items()}
    new = [emoji for emoji in new if emoji]
    new_set = set(new)

    for emoji in old:
        if not emoji or emoji in new_set or emoji not in result:
            continue
        names = [name for name in result[emoji] if name != actor_name]
        if names:
            result[emoji] = names
        else:
            del result[emoji]

    for emoji in new:
        names = result.setdefault(emoji, [])
        if actor_name not in names:
            names.append(actor_name)
    return result
