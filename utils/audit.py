"""
Audit trail helpers.
Stamps created/updated fields on records and logs before/after changes.
"""

import logging

from utils.datetime_helpers import format_timestamp, get_now

# Configure logger for audit operations
logger = logging.getLogger(__name__)

UNKNOWN_USER = 'Unknown'


def stamp_created(record: dict, created_by: str = None, now=None) -> dict:
    """
    Return a copy of a new record with its creation audit fields set.

    Args:
        record: Record dict
        created_by: Name of the operator creating it
        now: Timestamp (defaults to current time)

    Returns:
        New dict with created_by / created_at
    """
    stamped = dict(record)
    stamped['created_by'] = created_by or UNKNOWN_USER
    stamped['created_at'] = format_timestamp(now or get_now())
    return stamped


def stamp_updated(record: dict, updated_by: str = None, now=None) -> dict:
    """
    Return a copy of a record with updated_by / updated_at set.

    created_by / created_at are carried over untouched.
    """
    stamped = dict(record)
    stamped['updated_by'] = updated_by or UNKNOWN_USER
    stamped['updated_at'] = format_timestamp(now or get_now())
    return stamped


def changed_fields(before: dict, after: dict) -> dict:
    """
    Fields whose value differs between two versions of a record.

    Returns:
        dict: {field: {'before': old, 'after': new}}
    """
    before = before or {}
    after = after or {}
    changes = {}
    for key in sorted(set(before) | set(after)):
        if key in ('updated_by', 'updated_at'):
            continue
        if before.get(key) != after.get(key):
            changes[key] = {'before': before.get(key), 'after': after.get(key)}
    return changes


def log_audit(
    action: str,
    entity_type: str,
    entity_id: str = None,
    before: dict = None,
    after: dict = None,
    user: str = None
) -> dict:
    """
    Log an audit entry.

    Args:
        action: Action type (CREATE, UPDATE, DELETE, CHECK_IN, ...)
        entity_type: Entity type (booking, room)
        entity_id: ID of the affected entity
        before: Entity state before the change
        after: Entity state after the change
        user: Operator name

    Returns:
        dict: The audit entry (for the caller to keep)

    Example:
        log_audit(
            action='UPDATE',
            entity_type='booking',
            entity_id='b1',
            before={'check_out_date': '2024-01-12'},
            after={'check_out_date': '2024-01-13'}
        )
    """
    changes = changed_fields(before, after) if before is not None and after is not None else None
    entry = {
        'action': action,
        'entity_type': entity_type,
        'entity_id': entity_id,
        'user': user or UNKNOWN_USER,
        'changes': changes,
        'timestamp': format_timestamp(get_now())
    }
    logger.info(
        f"[Audit] {entry['user']} {action} {entity_type}/{entity_id}"
        + (f" fields={sorted(changes)}" if changes else '')
    )
    return entry


def log_create(entity_type: str, entity_id: str, data: dict = None, user: str = None) -> dict:
    """Log a CREATE action."""
    entry = log_audit('CREATE', entity_type, entity_id, user=user)
    entry['after'] = data
    return entry


def log_update(entity_type: str, entity_id: str, before: dict = None, after: dict = None, user: str = None) -> dict:
    """Log an UPDATE action with before/after state."""
    return log_audit('UPDATE', entity_type, entity_id, before=before, after=after, user=user)


def log_delete(entity_type: str, entity_id: str, data: dict = None, user: str = None) -> dict:
    """Log a DELETE action, keeping the deleted record in the entry."""
    entry = log_audit('DELETE', entity_type, entity_id, user=user)
    entry['before'] = data
    return entry


# Export public API
__all__ = [
    'stamp_created',
    'stamp_updated',
    'changed_fields',
    'log_audit',
    'log_create',
    'log_update',
    'log_delete'
]
