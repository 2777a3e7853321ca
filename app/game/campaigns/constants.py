from __future__ import annotations

from datetime import time

CAMPAIGN_STATUSES = ("PLANNED", "IN_PROGRESS", "COMPLETED")
DEFAULT_SCHEDULE_TIME = time(8, 0)
DEFAULT_DEADLINE_TIME = time(18, 0)
DEFAULT_POINTS_ON_TIME = 1000
DEFAULT_POINTS_LATE = 500
DEFAULT_SPECIAL_WINDOW_MINUTES = 1
MIN_CHOICES = 2
MAX_CHOICES = 4
