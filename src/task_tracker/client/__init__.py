"""
Client-side view-model for the task list, independent of any UI toolkit.
"""

from .controller import Notifier, TaskController  # noqa: F401
from .views import HtmlTaskView, TaskView  # noqa: F401
