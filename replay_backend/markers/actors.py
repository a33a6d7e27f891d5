"""
Target actor classification for the "hide non-player" filter.

The source events do not reliably carry actor-kind metadata. When the kind
is missing, resolve_target_kind falls back to a name heuristic: realm-qualified
player names embed a hyphen ("Name-Realm"). This misclassifies realm-less
player names and hyphenated NPC names; keep it behind this single function
until the upstream parser provides a stronger signal.
"""

from __future__ import annotations
from typing import Optional

from ..contracts.events import TargetKind

REALM_SEPARATOR = "-"


def resolve_target_kind(
    target: Optional[str],
    target_kind: Optional[TargetKind] = None,
) -> Optional[TargetKind]:
    """Explicit kind wins; otherwise PLAYER for hyphenated names, else None."""
    if target_kind is not None:
        return target_kind
    if target and REALM_SEPARATOR in target:
        return TargetKind.PLAYER
    return None


def is_hidden_for_non_player_filter(
    target: Optional[str],
    target_kind: Optional[TargetKind] = None,
) -> bool:
    """
    True when a row must be hidden while "hide non-player" is on.

    Unresolved targets count as non-player. Rows without any target
    (manual markers) have nothing to classify and stay visible.
    """
    if not target and target_kind is None:
        return False
    return resolve_target_kind(target, target_kind) is not TargetKind.PLAYER
