"""
Review queue.

Missed questions are recorded per user and re-surfaced in review sessions
until answered correctly.
"""

from src.review.queue_manager import HOT_ATTEMPT_THRESHOLD, ReviewQueueManager, ReviewStats

__all__ = [
    "ReviewQueueManager",
    "ReviewStats",
    "HOT_ATTEMPT_THRESHOLD",
]
