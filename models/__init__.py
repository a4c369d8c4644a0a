"""
Single import point for every ORM model, so Alembic and test fixtures see the
full metadata with foreign keys resolved.
"""

from src.task.models import Task as Task
from src.user.auth.models import RefreshToken as RefreshToken
from src.user.models import User as User
