"""Saving, applying and deleting reusable loan templates."""
import logging

from pydantic import ValidationError

from ..data import execute, parse_rows
from ..records import LoanTemplate, LoanTemplateFields

logger = logging.getLogger(__name__)


class LoanTemplates:
    """Template actions for one user.

    Mutations report their outcome as a boolean plus a notification and never
    raise; local state is left unchanged when the backend call fails.
    """

    def __init__(self, client, user_id, notifier):
        self.client = client
        self.user_id = user_id
        self.notifier = notifier
        self.is_manager_open = False
        self.show_save_template = False
        self.is_saving = False
        self.template_name = ''
        # set when the last mutation reached the backend and failed there
        self.backend_failed = False

    def open_manager(self):
        self.is_manager_open = True

    def close_manager(self):
        self.is_manager_open = False

    def list(self):
        """Templates of the user, newest first; ``[]`` when they cannot be loaded."""
        try:
            rows = execute(
                self.client.table('loan_templates')
                .select('*')
                .eq('user_id', self.user_id)
                .order('created_at', desc=True)
            )
        except Exception as e:
            logger.error(f"Error loading templates: {e}")
            self.notifier.error('Failed to load templates')
            return []
        return parse_rows(LoanTemplate, rows)

    def save(self, template_data, name=None):
        """Store ``template_data`` under the current template name."""
        self.backend_failed = False
        if name is not None:
            self.template_name = name
        if not (self.template_name or '').strip():
            self.notifier.error('Please enter a template name')
            return False

        try:
            fields = LoanTemplateFields.model_validate(template_data or {})
        except ValidationError as e:
            logger.info(f"Rejected template fields: {e}")
            self.notifier.error('Please check your input and try again.')
            return False

        self.is_saving = True
        try:
            execute(
                self.client.table('loan_templates').insert({
                    'user_id': self.user_id,
                    'name': self.template_name.strip(),
                    **fields.model_dump(mode='json', exclude_none=True),
                })
            )
        except Exception as e:
            logger.error(f"Error saving template: {e}")
            self.backend_failed = True
            self.notifier.error('Failed to save template')
            return False
        finally:
            self.is_saving = False

        self.notifier.success('Template saved successfully')
        self.template_name = ''
        self.show_save_template = False
        return True

    def load(self, template, apply_fn):
        apply_fn(template)
        self.notifier.success(f'Template "{template.name}" loaded')
        self.is_manager_open = False

    def delete(self, template_id):
        """Delete one of the user's templates; rows owned by others are never matched."""
        self.backend_failed = False
        try:
            execute(
                self.client.table('loan_templates')
                .delete()
                .eq('id', template_id)
                .eq('user_id', self.user_id)
            )
        except Exception as e:
            logger.error(f"Error deleting template: {e}")
            self.backend_failed = True
            self.notifier.error('Failed to delete template')
            return False

        self.notifier.success('Template deleted')
        return True
