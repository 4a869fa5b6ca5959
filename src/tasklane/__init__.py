"""Terminal kanban client for a task board REST API."""

__version__ = "0.1.0"
