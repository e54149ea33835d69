"""
Category gate.

Intercepts selection of a password-protected category and only requests the
filter change once the password has been verified. Any verification error
counts as a wrong password.
"""
import enum
import logging
from typing import Awaitable, Callable, Optional

from utils.catalog import ALL_CATEGORY

logger = logging.getLogger(__name__)

WRONG_PASSWORD_MESSAGE = "Incorrect password"
EMPTY_PASSWORD_MESSAGE = "Please enter a password"


class GateState(str, enum.Enum):
    IDLE = "idle"
    PROMPTING = "prompting"


class GateResult(str, enum.Enum):
    VERIFIED = "verified"
    REJECTED = "rejected"
    IGNORED = "ignored"


class CategoryGate:
    def __init__(
        self,
        is_protected: Callable[[str], bool],
        verify: Callable[[str, str], Awaitable[bool]],
        request_filter: Callable[[str], None],
    ):
        self._is_protected = is_protected
        self._verify = verify
        self._request_filter = request_filter
        self.state = GateState.IDLE
        self.target: Optional[str] = None
        self.credential = ""
        self.failure: Optional[str] = None
        self.verifying = False

    @property
    def prompting(self) -> bool:
        return self.state is GateState.PROMPTING

    def select(self, category: str) -> bool:
        """Returns True when the filter change was requested immediately."""
        if category == ALL_CATEGORY or not self._is_protected(category):
            # A direct selection supersedes any open prompt
            self._reset()
            self._request_filter(category)
            return True
        if self.state is GateState.IDLE:
            self.state = GateState.PROMPTING
            self.target = category
            self.credential = ""
            self.failure = None
        return False

    async def submit(self, password: Optional[str] = None) -> GateResult:
        if self.state is not GateState.PROMPTING or self.verifying:
            return GateResult.IGNORED
        if password is not None:
            self.credential = password
        if not self.credential.strip():
            self.failure = EMPTY_PASSWORD_MESSAGE
            return GateResult.REJECTED

        target = self.target
        self.verifying = True
        try:
            ok = await self._verify(target, self.credential)
        except Exception as ex:
            logger.warning(f"password check for {target!r} failed: {ex}")
            ok = False
        finally:
            self.verifying = False

        if self.state is not GateState.PROMPTING or self.target != target:
            # Prompt was closed while the check was in flight
            return GateResult.IGNORED
        if not ok:
            self.credential = ""
            self.failure = WRONG_PASSWORD_MESSAGE
            return GateResult.REJECTED

        self._reset()
        self._request_filter(target)
        return GateResult.VERIFIED

    def close(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.state = GateState.IDLE
        self.target = None
        self.credential = ""
        self.failure = None
