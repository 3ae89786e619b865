from .user import User
from .profile import Profile, UserRole
from .evaluation import Evaluation, EvaluationType

__all__ = [
    "User",
    "Profile",
    "UserRole",
    "Evaluation",
    "EvaluationType",
]
