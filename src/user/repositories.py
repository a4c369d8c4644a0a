from src.core.database.repositories import BaseRepository
from src.user.models import User


class UserRepository(BaseRepository[User]):
    """
    User lookups used by authentication: by `username` (login), by `id`
    (token subject) and by `api_key` (legacy header auth).
    """

    model = User
