import logging

logger = logging.getLogger(__name__)


class Notifier:
    """Collects transient user-facing messages (toasts) raised while serving a request."""

    def __init__(self):
        self.messages = []

    def _push(self, level, message):
        logger.debug(f"notify[{level}] {message}")
        self.messages.append({'level': level, 'message': message})

    def success(self, message):
        self._push('success', message)

    def error(self, message):
        self._push('error', message)

    def warning(self, message):
        self._push('warning', message)

    def info(self, message):
        self._push('info', message)

    def last(self):
        return self.messages[-1] if self.messages else None

    def drain(self):
        messages, self.messages = self.messages, []
        return messages
