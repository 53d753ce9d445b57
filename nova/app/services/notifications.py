"""Outbound notifications.

Delivery itself belongs to an external email service; the default sender only
records the request. Sending the same reminder twice is acceptable.
"""

import logging

logger = logging.getLogger(__name__)


class NotificationSender:
    def send_session_reminder(self, session_id: int) -> None:
        raise NotImplementedError


class LoggingNotificationSender(NotificationSender):
    def send_session_reminder(self, session_id: int) -> None:
        logger.info("Session reminder queued for session %s", session_id)


_sender: NotificationSender = LoggingNotificationSender()


def get_notification_sender() -> NotificationSender:
    return _sender
