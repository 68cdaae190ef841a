"""Group lookup and selection for group loans."""
import logging

from ..data import execute, parse_rows
from ..records import Group

logger = logging.getLogger(__name__)


class LoanGroups:
    """Groups owned by one user plus the one currently picked for a group loan.

    Rows are fetched when the selector is enabled for a user and again whenever
    either of those parameters changes.
    """

    def __init__(self, client, user_id, notifier, enabled=False):
        self.client = client
        self.notifier = notifier
        self.groups = []
        self.selected_group_id = None
        self.is_loading = False
        self._user_id = user_id
        self._enabled = enabled
        self.refresh()

    @property
    def user_id(self):
        return self._user_id

    @user_id.setter
    def user_id(self, value):
        if value != self._user_id:
            self._user_id = value
            self.refresh()

    @property
    def enabled(self):
        return self._enabled

    @enabled.setter
    def enabled(self, value):
        if value != self._enabled:
            self._enabled = value
            self.refresh()

    def refresh(self):
        if not self._enabled or not self._user_id:
            return self.groups

        self.is_loading = True
        try:
            rows = execute(
                self.client.table('groups')
                .select('*')
                .eq('user_id', self._user_id)
                .order('created_at', desc=True)
            )
            self.groups = parse_rows(Group, rows)
        except Exception as e:
            logger.error(f"Error fetching groups: {e}")
            self.notifier.error('Failed to load groups')
        finally:
            self.is_loading = False
        return self.groups

    @property
    def selected_group(self):
        for group in self.groups:
            if str(group.id) == str(self.selected_group_id):
                return group
        return None

    def select(self, group_id):
        self.selected_group_id = group_id

    def clear_selection(self):
        self.selected_group_id = None
