from __future__ import annotations

# Wrong answers still earn a flat participation reward; the tiers do not depend
# on the question's configured points.
WRONG_SPECIAL_ON_TIME_POINTS = 600
WRONG_SPECIAL_LATE_POINTS = 300
WRONG_REGULAR_ON_TIME_POINTS = 300
WRONG_REGULAR_LATE_POINTS = 150
