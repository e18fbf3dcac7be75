"""Tests for the bookmark lifecycle state machine."""
import pytest

from models.bookmark import BookmarkStatus
from services.exceptions import InvalidStateError
from services.lifecycle import LifecycleAction, next_status, parse_action

ACTIVE = BookmarkStatus.ACTIVE
ARCHIVED = BookmarkStatus.ARCHIVED
TRASHED = BookmarkStatus.TRASHED


@pytest.mark.parametrize(
    ("current", "action", "expected"),
    [
        (ACTIVE, LifecycleAction.ARCHIVE, ARCHIVED),
        (ACTIVE, LifecycleAction.TRASH, TRASHED),
        (ARCHIVED, LifecycleAction.RESTORE, ACTIVE),
        (TRASHED, LifecycleAction.RESTORE, ACTIVE),
    ],
)
def test_next_status_allowed_transitions(
    current: BookmarkStatus, action: LifecycleAction, expected: BookmarkStatus,
) -> None:
    """Every allowed transition reaches its target status."""
    assert next_status(current, action) == expected


@pytest.mark.parametrize(
    ("current", "action"),
    [
        (ARCHIVED, LifecycleAction.ARCHIVE),
        (TRASHED, LifecycleAction.TRASH),
        (ACTIVE, LifecycleAction.RESTORE),
    ],
)
def test_next_status_repeated_action_is_noop(
    current: BookmarkStatus, action: LifecycleAction,
) -> None:
    """Applying an action to a bookmark already at its target keeps the status."""
    assert next_status(current, action) == current


def test_next_status_archive_from_trash_is_rejected() -> None:
    """Trashed bookmarks must be restored before they can be archived."""
    with pytest.raises(InvalidStateError, match="Cannot archive a bookmark that is trashed"):
        next_status(TRASHED, LifecycleAction.ARCHIVE)


def test_next_status_trash_from_archive_is_rejected() -> None:
    """Archived bookmarks must be restored before they can be trashed."""
    with pytest.raises(InvalidStateError, match="Cannot trash a bookmark that is archived"):
        next_status(ARCHIVED, LifecycleAction.TRASH)


@pytest.mark.parametrize("current", [ACTIVE, ARCHIVED, TRASHED])
def test_next_status_delete_from_any_state(current: BookmarkStatus) -> None:
    """Delete is allowed from every state and has no resulting status."""
    assert next_status(current, LifecycleAction.DELETE) is None


def test_parse_action_defaults_to_delete() -> None:
    """A missing or empty action means a permanent delete."""
    assert parse_action(None) is LifecycleAction.DELETE
    assert parse_action("") is LifecycleAction.DELETE


def test_parse_action_known_names() -> None:
    """Action names map onto the enum."""
    assert parse_action("archive") is LifecycleAction.ARCHIVE
    assert parse_action("trash") is LifecycleAction.TRASH
    assert parse_action("restore") is LifecycleAction.RESTORE
    assert parse_action("delete") is LifecycleAction.DELETE


def test_parse_action_unknown_name_raises() -> None:
    """Unknown actions are rejected."""
    with pytest.raises(ValueError):
        parse_action("purge")
