"""Task groups and the namespace they are loaded into."""

from .base import Tasks
from .namespace import Namespace, TaskDefinition, TaskGroup, TaskHandler

__all__ = ["Namespace", "TaskDefinition", "TaskGroup", "TaskHandler", "Tasks"]
