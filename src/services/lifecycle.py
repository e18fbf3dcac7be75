"""
Bookmark lifecycle state machine.

States are the stored statuses (active, archived, trashed) plus a terminal
"deleted" state that is represented by removing the row. ``restore`` always
leads back to active, whichever partition the bookmark was in.

    active   --archive-->  archived
    active   --trash---->  trashed
    archived --restore-->  active
    trashed  --restore-->  active
    any      --delete--->  (deleted)

Applying an action whose target is the current status is a no-op, so repeated
archive/trash/restore requests are idempotent.
"""
import enum

from models.bookmark import BookmarkStatus
from services.exceptions import InvalidStateError


class LifecycleAction(str, enum.Enum):
    """Status-changing actions accepted by ``DELETE /bookmarks``."""

    ARCHIVE = "archive"
    TRASH = "trash"
    RESTORE = "restore"
    DELETE = "delete"


# action -> (statuses it may be applied to, resulting status)
TRANSITIONS: dict[LifecycleAction, tuple[frozenset[BookmarkStatus], BookmarkStatus]] = {
    LifecycleAction.ARCHIVE: (
        frozenset({BookmarkStatus.ACTIVE}),
        BookmarkStatus.ARCHIVED,
    ),
    LifecycleAction.TRASH: (
        frozenset({BookmarkStatus.ACTIVE}),
        BookmarkStatus.TRASHED,
    ),
    LifecycleAction.RESTORE: (
        frozenset({BookmarkStatus.ARCHIVED, BookmarkStatus.TRASHED}),
        BookmarkStatus.ACTIVE,
    ),
}


def parse_action(value: str | None) -> LifecycleAction:
    """Parse an action name. A missing action means a permanent delete."""
    if not value:
        return LifecycleAction.DELETE
    return LifecycleAction(value)


def next_status(current: BookmarkStatus, action: LifecycleAction) -> BookmarkStatus | None:
    """
    Compute the status a bookmark moves to when ``action`` is applied.

    Args:
        current: The bookmark's current status.
        action: The action to apply.

    Returns:
        The new status, or None for ``delete`` (the row is removed).

    Raises:
        InvalidStateError: If the action is not allowed from ``current``.
    """
    if action is LifecycleAction.DELETE:
        return None
    sources, target = TRANSITIONS[action]
    if current == target:
        return current
    if current not in sources:
        raise InvalidStateError(
            f"Cannot {action.value} a bookmark that is {BookmarkStatus(current).value}",
        )
    return target
