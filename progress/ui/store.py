"""Process-wide UI state.

Two tiers live here: durable preferences (theme, sidebar) written to client
storage on every change and restored once when the store is built, and
ephemeral flags that start from their defaults on every load.
"""
import json
import logging

logger = logging.getLogger(__name__)

STORAGE_KEY = 'progress-app-storage'
THEMES = ('light', 'dark', 'system')


class AppStore:
    def __init__(self, storage):
        self.storage = storage

        # durable
        self.theme = 'light'
        self.sidebar_open = True

        # ephemeral
        self.command_palette_open = False
        self.help_modal_open = False
        self.unread_notifications = 0

        self._restore()

    def _restore(self):
        raw = self.storage.get(STORAGE_KEY)
        if not raw:
            return
        try:
            saved = json.loads(raw) if isinstance(raw, str) else dict(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable UI preferences: {e}")
            return
        if not isinstance(saved, dict):
            logger.warning("Ignoring UI preferences that are not an object")
            return
        if saved.get('theme') in THEMES:
            self.theme = saved['theme']
        if isinstance(saved.get('sidebarOpen'), bool):
            self.sidebar_open = saved['sidebarOpen']

    def _persist(self):
        self.storage[STORAGE_KEY] = json.dumps({
            'theme': self.theme,
            'sidebarOpen': self.sidebar_open,
        })

    def set_theme(self, theme):
        if theme not in THEMES:
            raise ValueError(f"theme must be one of: {', '.join(THEMES)}")
        self.theme = theme
        self._persist()

    def toggle_sidebar(self):
        self.sidebar_open = not self.sidebar_open
        self._persist()

    def set_sidebar_open(self, open_):
        self.sidebar_open = bool(open_)
        self._persist()

    def open_command_palette(self):
        self.command_palette_open = True

    def close_command_palette(self):
        self.command_palette_open = False

    def open_help_modal(self):
        self.help_modal_open = True

    def close_help_modal(self):
        self.help_modal_open = False

    def set_unread_notifications(self, count):
        if count < 0:
            raise ValueError('unread notification count cannot be negative')
        self.unread_notifications = count

    def snapshot(self):
        return {
            'theme': self.theme,
            'sidebarOpen': self.sidebar_open,
            'commandPaletteOpen': self.command_palette_open,
            'helpModalOpen': self.help_modal_open,
            'unreadNotifications': self.unread_notifications,
        }
