from src.core.schemas import Base


class UserProfileViewModel(Base):
    id: int
    name: str
    username: str


class RegisteredUserViewModel(UserProfileViewModel):
    api_key: str
