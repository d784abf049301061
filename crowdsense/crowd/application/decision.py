"""
Threshold-based redirection decisions.

    score <= warn              GREEN     PROCEED   allowed
    warn < score <= block      ORANGE    WARN      allowed
    block < score <= redirect  RED       BLOCK     not allowed (soft, caller may override)
    score > redirect           DARK_RED  REDIRECT  not allowed (hard)
"""
import logging
from typing import Optional

from ..domain.entities import Action, AlertLevel, RedirectDecision, Suggestion
from ..domain.protocols import AlternateFinder

logger = logging.getLogger(__name__)


class RedirectEngine:
    def __init__(self, alternate_finder: Optional[AlternateFinder] = None,
                 warn: float = 80.0, block: float = 90.0, redirect: float = 95.0):
        self.alternate_finder = alternate_finder
        self.warn = warn
        self.block = block
        self.redirect = redirect

    def _suggest(self, spot_id: str) -> Optional[Suggestion]:
        if self.alternate_finder is None:
            return None
        return self.alternate_finder.find_alternate(spot_id)

    def decide(self, spot_id: str, score: int) -> RedirectDecision:
        if score > self.redirect:
            suggestion = self._suggest(spot_id)
            if suggestion is None:
                logger.info(f"No alternate found for {spot_id} at score {score}, degrading to block")
                message = f"Critical congestion ({score}%). No alternative is available right now, please postpone your visit."
            else:
                message = (f"Critical congestion ({score}%). Redirecting to "
                           f"{suggestion.spot_name} to avoid gridlock.")
            return RedirectDecision(
                allowed=False,
                action=Action.REDIRECT,
                level=AlertLevel.DARK_RED,
                score=score,
                message=message,
                suggestion=suggestion,
            )

        if score > self.block:
            suggestion = self._suggest(spot_id)
            if suggestion is None:
                message = f"Destination full ({score}%). Please visit later."
            else:
                message = f"Destination full ({score}%). We recommend visiting {suggestion.spot_name} instead."
            return RedirectDecision(
                allowed=False,
                action=Action.BLOCK,
                level=AlertLevel.RED,
                score=score,
                message=message,
                suggestion=suggestion,
            )

        if score > self.warn:
            return RedirectDecision(
                allowed=True,
                action=Action.WARN,
                level=AlertLevel.ORANGE,
                score=score,
                message=f"High congestion ({score}%). Expect delays and limited parking.",
            )

        return RedirectDecision(
            allowed=True,
            action=Action.PROCEED,
            level=AlertLevel.GREEN,
            score=score,
        )
