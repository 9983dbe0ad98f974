"""
HashPath Verification

Checks a claimed HashPath against the ordered list of messages alleged to
have produced it. For a history ``[M1, M2, M3, ...]`` every window of three
must satisfy ``extend(M1, M2) == current_hashpath(M3)``; the list is then
shifted by one and checked again.

Verification is fail-closed: any mismatch, and any error while
recomputing a window, makes the whole history invalid. Only the algorithm
declared on each base message at the moment it is extended is checked.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from .engine import current_hashpath, extend
from .errors import HashPathError
from .logging_config import chain_events
from .options import ErrorStrategy, coerce_options


class VerificationOutcome(str, Enum):
    """
    VALID: every window of the history matches
    INVALID: a window did not match, or could not be recomputed
    """
    VALID = "VALID"
    INVALID = "INVALID"


@dataclass
class VerificationResult:
    """Result of verifying a message history."""
    outcome: VerificationOutcome
    reason: Optional[str] = None
    window: Optional[int] = None
    details: Optional[Dict[str, Any]] = None

    def is_valid(self) -> bool:
        return self.outcome == VerificationOutcome.VALID

    def __bool__(self) -> bool:
        return self.is_valid()

    @classmethod
    def valid(cls) -> 'VerificationResult':
        return cls(outcome=VerificationOutcome.VALID)

    @classmethod
    def invalid(cls, reason: str, window: int, details: Dict[str, Any] = None) -> 'VerificationResult':
        return cls(outcome=VerificationOutcome.INVALID, reason=reason, window=window, details=details)


class HashPathVerifier:
    """
    Verifies message histories.

    Holds the options used to recompute every window, so a verifier can be
    configured once (identity policy, default algorithm) and reused.
    """

    def __init__(self, opts=None):
        self.opts = coerce_options(opts)
        # Windows always raise internally; failures become results
        self._window_opts = self.opts.model_copy(update={"error_strategy": ErrorStrategy.THROW})

    def verify(self, history: Sequence[Any]) -> VerificationResult:
        """
        Verify a history of at least three messages.

        Shorter histories have no window to check and are valid.
        """
        for window in range(len(history) - 2):
            base, applied, produced = history[window:window + 3]
            result = self._verify_window(window, base, applied, produced)
            if not result.is_valid():
                chain_events.verification_mismatch(
                    window,
                    (result.details or {}).get("expected"),
                    (result.details or {}).get("declared"),
                    result.reason
                )
                return result
        return VerificationResult.valid()

    def _verify_window(self, window: int, base: Any, applied: Any, produced: Any) -> VerificationResult:
        try:
            expected = extend(base, applied, self._window_opts)
            declared = current_hashpath(produced, self._window_opts)
        except HashPathError as error:
            return VerificationResult.invalid(
                f"Cannot recompute hashpath: {error}",
                window,
                {"error": error.kind}
            )

        if expected != declared:
            return VerificationResult.invalid(
                "Hashpath mismatch",
                window,
                {"expected": expected, "declared": declared}
            )
        return VerificationResult.valid()


def verify(history: Sequence[Any], opts=None) -> bool:
    """True if every window of ``history`` chains correctly."""
    return HashPathVerifier(opts).verify(history).is_valid()


def verify_detailed(history: Sequence[Any], opts=None) -> VerificationResult:
    """Verify ``history``, returning the structured outcome."""
    return HashPathVerifier(opts).verify(history)
