from planner.models.base import Base, BaseModel, TimeStamp, utcnow

__all__ = ["Base", "BaseModel", "TimeStamp", "utcnow"]
