"""
Account registration, login and security-question based recovery.

Every call is independent: nothing is cached between calls and no session
or token is issued.
"""

from typing import Any, Dict

from starlette.concurrency import run_in_threadpool

from api.auth import PasswordHasher, answers_match
from api.errors import Conflict, Unauthorized
from api.models import Credentials, PasswordReset, SecurityQuestionCheck
from api.validation import parse_payload
from storage.base import CollectionStore
from utilities.logger import AuthLogger


class CredentialService:
    """Credential checks over the users collection (keyed on ``email``)."""

    def __init__(self, store: CollectionStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher
        self.audit = AuthLogger("api.credentials")
        # login checks unknown emails against this hash
        self._dummy_hash = hasher.hash("not-a-real-password")

    async def _hash(self, password: str) -> str:
        # bcrypt blocks for the whole work factor
        return await run_in_threadpool(self.hasher.hash, password)

    async def _verify(self, password: str, hashed: str) -> bool:
        return await run_in_threadpool(self.hasher.verify, password, hashed)

    async def register(self, payload: Any) -> Dict[str, str]:
        """
        Create an account from ``{email, password}``.

        Returns:
            The registered email, never the password or its hash

        Raises:
            BadRequest: payload is not exactly ``{email, password}``
            Conflict: the email is already registered
        """
        credentials = parse_payload(payload, Credentials)

        existing = await self.store.find_one({"email": credentials.email})
        if existing.ok:
            self.audit.log_registration(credentials.email, success=False, reason="duplicate")
            raise Conflict()

        account = {
            "email": credentials.email,
            "password": await self._hash(credentials.password),
        }
        result = await self.store.insert_one(account)
        if result.conflict:
            # registered concurrently between the lookup and the insert
            self.audit.log_registration(credentials.email, success=False, reason="duplicate")
            raise Conflict()

        self.audit.log_registration(credentials.email, success=True)
        return {"email": credentials.email}

    async def login(self, payload: Any) -> None:
        """
        Check ``{email, password}`` against the stored hash.

        Unknown accounts and wrong passwords raise the same Unauthorized so
        the response does not reveal whether an account exists.

        Raises:
            BadRequest: payload is not exactly ``{email, password}``
            Unauthorized: unknown email or wrong password
        """
        credentials = parse_payload(payload, Credentials)

        result = await self.store.find_one({"email": credentials.email})
        if result.not_found:
            self.audit.log_login(credentials.email, success=False)
            await self._verify(credentials.password, self._dummy_hash)
            raise Unauthorized()

        if not await self._verify(credentials.password, result.value.get("password", "")):
            self.audit.log_login(credentials.email, success=False)
            raise Unauthorized()

        self.audit.log_login(credentials.email, success=True)

    async def _check_answers(self, email: str, answers, operation: str) -> None:
        result = await self.store.find_one({"email": email})
        stored = result.value.get("securityQuestions") if result.ok else None
        supplied = [item.answer for item in answers]

        if not result.ok or not answers_match(supplied, stored):
            self.audit.log_security_check(email, success=False, operation=operation)
            raise Unauthorized()

        self.audit.log_security_check(email, success=True, operation=operation)

    async def verify_security_questions(self, email: str, payload: Any) -> None:
        """
        Check three security answers without changing the account.

        Raises:
            BadRequest: payload is not exactly ``{securityQuestions: [3 answers]}``
            Unauthorized: unknown account or any answer mismatch
        """
        check = parse_payload(payload, SecurityQuestionCheck)
        await self._check_answers(email, check.security_questions, operation="verify")

    async def reset_password(self, email: str, payload: Any) -> Dict[str, str]:
        """
        Replace an account's password after all three answers match in order.

        Returns:
            Non-sensitive account fields

        Raises:
            BadRequest: payload is not exactly ``{newPassword, securityQuestions}``
            Unauthorized: unknown account or any answer mismatch
        """
        reset = parse_payload(payload, PasswordReset)
        await self._check_answers(email, reset.security_questions, operation="reset")

        new_hash = await self._hash(reset.new_password)
        result = await self.store.update_one(email, {"password": new_hash})
        if result.not_found:
            # removed out from under us; same answer as an unknown account
            raise Unauthorized()

        self.audit.log_password_reset(email)
        return {"email": email}
