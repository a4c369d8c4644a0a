from src.core.database.repositories import BaseRepository
from src.task.models import Task


class TaskRepository(BaseRepository[Task]):
    model = Task
