"""
Report list view state - what a page or client currently shows.

Keeps the last accepted query result and patches it in place after
mutations instead of refetching. Every query is tagged with a sequence
number; a result that arrives for an older query than the latest one
issued is dropped.
"""
from facility_admin.services.lifecycle import STATUS_PENDING
from facility_admin.services.outcomes import ReportChange, ReportRemoved


class ReportListView:

    def __init__(self):
        self.reports = []
        self.error = None
        self.notice = None
        self.loading = False
        self._latest_seq = 0

    @property
    def latest_seq(self):
        return self._latest_seq

    def begin_query(self):
        """Issue a new query tag. Older in-flight results become stale."""
        self._latest_seq += 1
        self.loading = True
        return self._latest_seq

    def is_current(self, seq):
        return seq == self._latest_seq

    def apply_result(self, seq, outcome):
        """
        Accept a query outcome if it is for the latest query.
        Failed queries show their message with an empty list.
        Returns True when applied, False when discarded as stale.
        """
        if not self.is_current(seq):
            return False

        self.loading = False
        if outcome.ok:
            self.reports = list(outcome.value)
            self.error = None
        else:
            self.reports = []
            self.error = outcome.message
        return True

    def apply_mutation(self, outcome):
        """
        Reflect a lifecycle outcome. On failure the list is left as it
        was and the message goes to ``notice``.
        """
        if not outcome.ok:
            self.notice = outcome.message
            return False

        change = outcome.value
        self.notice = None
        if isinstance(change, ReportRemoved):
            self.reports = [r for r in self.reports if r['id'] != change.report_id]
        elif isinstance(change, ReportChange):
            self.reports = [
                dict(r, **change.fields) if r['id'] == change.report_id else r
                for r in self.reports
            ]
        return True

    def counts(self):
        pending = sum(1 for r in self.reports if r['status'] == STATUS_PENDING)
        return {
            'total': len(self.reports),
            'pending': pending,
            'completed': len(self.reports) - pending,
        }
