from app.models.user import User
from app.models.assessment import Assessment, Question, Option
from app.models.result import Result, StudentAnswer

__all__ = ["User", "Assessment", "Question", "Option", "Result", "StudentAnswer"]
