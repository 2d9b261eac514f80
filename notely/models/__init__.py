# Importing the models registers them on Base.metadata
from notely.models.base import Base
from notely.models.entry import Entry
from notely.models.user import User

__all__ = ["Base", "Entry", "User"]
