from src.user.repositories import UserRepository


def get_user_repository() -> UserRepository:
    return UserRepository()
