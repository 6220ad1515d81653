"""Navigation Package"""

from commitsplit.navigator.navigator import Navigator
from commitsplit.navigator.session import SplitSession, SessionError

__all__ = [
    "Navigator",
    "SplitSession",
    "SessionError",
]
