from gymtracker.models.user import User
from gymtracker.models.document import UserDocument

__all__ = ["User", "UserDocument"]
