"""
Password hashing and security answer checks.
"""

import hmac
from typing import Any, Dict, List, Sequence

import bcrypt
import structlog

logger = structlog.get_logger(__name__)

SECURITY_QUESTION_COUNT = 3

# bcrypt only reads the first 72 bytes of a password
PASSWORD_MAX_BYTES = 72


class PasswordHasher:
    """Salted one-way password hashing with bcrypt."""

    def __init__(self, rounds: int = 10):
        """
        Args:
            rounds: bcrypt log2 work factor
        """
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password. The result embeds its own salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """
        Check a plaintext password against a stored hash.

        A malformed or missing stored hash counts as a mismatch.
        """
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False


def _same_text(supplied: str, stored: Any) -> bool:
    if not isinstance(stored, str):
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))


def answers_match(supplied: Sequence[str], stored_questions: List[Dict[str, Any]]) -> bool:
    """
    Compare supplied answers with an account's stored security questions.

    Comparison is positional and case-sensitive: answer ``i`` must equal the
    stored answer of question ``i``, and all three must match. An account
    without exactly three stored questions never matches.

    Args:
        supplied: Answers in the caller's order
        stored_questions: The account's ``securityQuestions`` documents

    Returns:
        True only when every position matches
    """
    if len(supplied) != SECURITY_QUESTION_COUNT:
        return False
    if not isinstance(stored_questions, list) or len(stored_questions) != SECURITY_QUESTION_COUNT:
        return False

    matches = [
        _same_text(answer, stored.get("answer") if isinstance(stored, dict) else None)
        for answer, stored in zip(supplied, stored_questions)
    ]
    return all(matches)
