"""
Report lifecycle - status rules and the two mutations an admin can make.

    pending ──mark_completed──> completed ──mark_completed──> completed
       │                            │
       └────────── delete ──────────┴──> (gone)

'completed' is re-enterable so the action note can be edited after the fact.
There is no way back to 'pending'. Both mutations need explicit confirmation
from the caller; without it nothing is touched.
"""
import logging

from facility_admin.services.outcomes import (NotFound, Ok, ReportChange,
                                              ReportRemoved, StoreFailure,
                                              ValidationError)
from facility_admin.services.store import StoreError
from facility_admin.utils.audit import log_audit

logger = logging.getLogger(__name__)

STATUS_PENDING = 'pending'
STATUS_COMPLETED = 'completed'
STATUSES = (STATUS_PENDING, STATUS_COMPLETED)

# Triage order: unresolved first
STATUS_RANK = {
    STATUS_PENDING: 0,
    STATUS_COMPLETED: 1,
}

TRANSITIONS = {
    STATUS_PENDING: {STATUS_COMPLETED},
    STATUS_COMPLETED: {STATUS_COMPLETED},
}

CONFIRMATION_REQUIRED = 'Confirmation required: this action cannot be undone.'


def can_transition(current_status, new_status):
    """
    Check a status change against the state machine.
    Returns: (allowed: bool, reason: str or None)
    """
    if current_status not in TRANSITIONS:
        return False, f'Unknown report status: {current_status!r}'
    if new_status not in TRANSITIONS[current_status]:
        return False, f'Cannot move a {current_status} report to {new_status}.'
    return True, None


def _clean_note(action_note):
    """Blank notes count as no note."""
    if action_note is None:
        return None
    action_note = action_note.strip()
    return action_note or None


def mark_completed(store, report_id, action_note=None, confirmed=False,
                   user_id=None, user_name=None):
    """
    Set a report to completed, optionally recording the action taken.

    Without action_note the existing action_taken is left alone, so calling
    this again on a completed report with the same (or no) note changes
    nothing.

    Returns Ok(ReportChange) listing exactly the fields written, or
    ValidationError / NotFound / StoreFailure.
    """
    if not confirmed:
        return ValidationError(CONFIRMATION_REQUIRED)

    if action_note is not None and not isinstance(action_note, str):
        return ValidationError('action_taken must be text')
    note = _clean_note(action_note)

    try:
        with store.atomic():
            report = store.get('report', report_id)
            if report is None:
                return NotFound(report_id)

            allowed, reason = can_transition(report['status'], STATUS_COMPLETED)
            if not allowed:
                return ValidationError(reason)

            fields = {'status': STATUS_COMPLETED}
            if note is not None:
                fields['action_taken'] = note

            if store.update('report', report_id, fields) == 0:
                return NotFound(report_id)

            if report['status'] == STATUS_PENDING:
                log_audit(store, 'report', report_id, 'report_completed',
                          old_value=report['status'], new_value=STATUS_COMPLETED,
                          user_id=user_id, user_name=user_name)
            elif note is not None and note != report['action_taken']:
                log_audit(store, 'report', report_id, 'action_updated',
                          old_value=report['action_taken'],
                          new_value=note,
                          user_id=user_id, user_name=user_name)
    except StoreError as e:
        logger.error('Failed to complete report %s: %s', report_id, e)
        return StoreFailure(str(e))

    logger.info('Report %s marked completed', report_id)
    return Ok(ReportChange(report_id, fields))


def delete_report(store, report_id, confirmed=False, user_id=None, user_name=None):
    """
    Hard-delete a report whatever its status.
    Returns Ok(ReportRemoved) or ValidationError / NotFound / StoreFailure.
    """
    if not confirmed:
        return ValidationError(CONFIRMATION_REQUIRED)

    try:
        with store.atomic():
            report = store.get('report', report_id)
            if report is None:
                return NotFound(report_id)

            if store.delete('report', report_id) == 0:
                return NotFound(report_id)

            log_audit(store, 'report', report_id, 'report_deleted',
                      old_value=report['status'],
                      user_id=user_id, user_name=user_name)
    except StoreError as e:
        logger.error('Failed to delete report %s: %s', report_id, e)
        return StoreFailure(str(e))

    logger.info('Report %s deleted', report_id)
    return Ok(ReportRemoved(report_id))
