from src.task.repositories import TaskRepository
from src.task.services import TaskService


def get_task_service() -> TaskService:
    return TaskService(repository=TaskRepository())
