"""
Purpose: Where "you have a new lead" notifications go.
What it does:
The core hands the sink one list of LeadNotification per fan-out and never
waits on, or reacts to, delivery. Email/SMS/push transports live outside
this package; the default sink only logs.
"""

from __future__ import annotations

import logging
from typing import List, Protocol

from .models import LeadNotification

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def notify(self, notifications: List[LeadNotification]) -> None: ...


class LoggingNotificationSink:
    def notify(self, notifications: List[LeadNotification]) -> None:
        for notification in notifications:
            logger.info(
                "Notifying provider %s about lead %s (priority %s, ETA %smin)",
                notification.provider_id,
                notification.lead_id,
                notification.priority,
                notification.estimated_response_time,
            )
