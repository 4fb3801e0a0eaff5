"""
quadflow: a four-stage task organizer (capture, classify, prioritize, execute).

The engine lives in `quadflow.tasks` and is driven through
`quadflow.core.facade.OperationFacade`.
"""

from .core.facade import OperationFacade
from .tasks.task_models import Category, Task, TaskStatus

__all__ = ["Category", "OperationFacade", "Task", "TaskStatus"]
