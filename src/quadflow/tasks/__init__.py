"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Category, TaskStatus, stats values)
- task_repository.py: in-memory task collection + typed patch contract
- ordering.py: dense per-category ordering (classify, reorder, move to top)
- execution.py: single-executor guard and the promotion cascade
- expiry.py: 24h expiry sweep
- stats.py: daily/weekly counters derived from a repository snapshot
- task_store.py: SQLite persistence for the task collection
- task_scheduler.py: periodic maintenance loop (cleanup + stats refresh)
"""
