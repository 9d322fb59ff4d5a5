"""
Audit Log Helper
Provides log_audit() for recording report state changes.

Usage:
    from facility_admin.utils.audit import log_audit

    with store.atomic():
        store.update('report', report_id, {'status': 'completed'})
        log_audit(
            store,
            entity_type='report',
            entity_id=report_id,
            action='report_completed',
            old_value='pending',
            new_value='completed',
        )
"""
from facility_admin.utils import generate_id
from facility_admin.utils.dates import now_timestamp


def log_audit(store, entity_type, entity_id, action,
              old_value=None, new_value=None,
              user_id=None, user_name=None, metadata=None):
    """
    Record an audit trail entry.

    Args:
        store: SqliteStore; pass the one the change was made on so both
            land in the same transaction
        entity_type: 'report'
        entity_id: ID of the entity being changed
        action: What happened (see action types below)
        old_value: Previous state (optional)
        new_value: New state (optional)
        user_id: Who performed the action
        user_name: Display name (denormalized for quick reads)
        metadata: JSON string with extra context (optional)
    """
    return store.insert('audit_log', {
        'id': generate_id('aud'),
        'entity_type': entity_type,
        'entity_id': entity_id,
        'action': action,
        'old_value': old_value,
        'new_value': new_value,
        'user_id': user_id or 'system',
        'user_name': user_name or 'System',
        'metadata': metadata,
        'created_at': now_timestamp(),
    })


# --- Standard action types for reference ---
# report_completed - pending report marked completed
# action_updated   - completed report re-marked, action note edited
# report_deleted   - report hard-deleted
