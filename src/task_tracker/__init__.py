"""
Task Tracker: a small REST service for tasks backed by one relational table,
plus a toolkit-independent client view-model.

The FastAPI application lives in ``task_tracker.main`` (``create_app`` or the
module-level ``app``).
"""

__version__ = "0.1.0"
