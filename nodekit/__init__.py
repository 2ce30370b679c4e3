"""In-memory queues, skip lists, leaderboards, timers, cron expressions and small utilities."""

__version__ = "0.1.0"