"""
Job Completion Poller

The RCM job screens have no push channel: a batch job's progress is only
visible by re-rendering the job list. The poller refreshes the list, finds
the row for a job by text, and checks completion signals in precedence
order:

1. a view/delete/export action is rendered on the row
2. the status holds a terminal phrase and not the in-progress phrase
3. (no owner filter, fallback enabled) the in-progress phrase is absent

Every attempt refreshes the table, so polling is never read-only.
"""

import logging
import time
from typing import Callable, Iterable, Optional

from playwright.sync_api import Error as PlaywrightError

from models.job_row import CompletionSignal, JobRow, PollBudget, PollState, TimeoutPolicy
from services.errors import JobCompletionTimeout, TransientLookupError

logger = logging.getLogger(__name__)

IN_PROGRESS_PHRASE = 'Running in a batch job'
TERMINAL_PHRASES = ('Charges to post:', 'Clean claims:', 'Completed')
COMPLETION_ACTIONS = ('view', 'delete', 'export')


class JobCompletionPoller:
    """Poll a job table until one job shows a completion signal."""

    def __init__(
        self,
        table,
        in_progress_phrase: str = IN_PROGRESS_PHRASE,
        terminal_phrases: Iterable[str] = TERMINAL_PHRASES,
        completion_actions: Iterable[str] = COMPLETION_ACTIONS,
        use_fallback_signal: bool = True,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic
    ):
        self._table = table
        self.in_progress_phrase = in_progress_phrase
        self.terminal_phrases = tuple(terminal_phrases)
        self.completion_actions = frozenset(completion_actions)
        self.use_fallback_signal = use_fallback_signal
        self._sleep = sleep
        self._clock = clock
        self.last_state: Optional[PollState] = None
        self.last_signal: Optional[CompletionSignal] = None

    def completion_signal(self, row: JobRow, allow_fallback: bool = False) -> Optional[CompletionSignal]:
        """Evaluate one row. First matching signal wins."""
        if row.action_affordances & self.completion_actions:
            return CompletionSignal.ACTIONS_AVAILABLE

        status = row.status_text
        running = self.in_progress_phrase in status
        if not running and any(phrase in status for phrase in self.terminal_phrases):
            return CompletionSignal.STATUS_CONCLUDED

        # Blank status is not evidence of completion
        if allow_fallback and not running and status.strip():
            return CompletionSignal.NOT_RUNNING

        return None

    def wait_for_completion(
        self,
        match_text: Optional[str],
        budget: PollBudget,
        policy: TimeoutPolicy = TimeoutPolicy.SOFT,
        owner: Optional[str] = None
    ) -> bool:
        """
        Poll until the job matching ``match_text`` (and ``owner``) completes.

        Args:
            match_text: Substring of the job's description or owner text.
                Empty matches the first row.
            budget: Attempt/duration bounds and the polling interval.
            policy: SOFT returns False on exhaustion, HARD raises.
            owner: Optional requesting-user filter. Disables the fallback signal.

        Returns:
            True once a completion signal is seen, False on SOFT exhaustion.

        Raises:
            JobCompletionTimeout: HARD policy and the budget ran out.
        """
        state = PollState(
            start_timestamp=self._clock(),
            max_attempts=budget.attempt_limit(),
            max_duration_s=budget.max_duration_s,
        )
        self.last_state = state
        self.last_signal = None
        allow_fallback = self.use_fallback_signal and owner is None
        label = match_text or owner or 'first job'

        logger.info(f"[JOB_POLL] ⏳ Waiting for job '{label}' to complete (max {state.max_attempts} attempts)")

        while True:
            state.attempt_count += 1
            logger.info(f"[JOB_POLL] 🔄 Checking job completion (attempt {state.attempt_count}/{state.max_attempts})")

            signal = self._attempt(match_text, owner, budget.settle_s, allow_fallback)
            if signal is not None:
                self.last_signal = signal
                logger.info(f"[JOB_POLL] ✅ Job '{label}' completed ({signal.value}) after {state.attempt_count} attempt(s)")
                return True

            if state.exhausted(self._clock()):
                break
            self._sleep(budget.interval_s)
            if state.exhausted(self._clock()):
                break

        elapsed = state.elapsed(self._clock())
        message = f"Job '{label}' did not complete after {state.attempt_count} attempt(s) ({elapsed:.1f}s)"
        if policy == TimeoutPolicy.HARD:
            logger.error(f"[JOB_POLL] ❌ {message}")
            raise JobCompletionTimeout(message, context={
                'match_text': match_text,
                'owner': owner,
                'attempts': state.attempt_count,
            })

        logger.warning(f"[JOB_POLL] ⚠️ {message} - proceeding anyway (job may still be processing)")
        return False

    def _attempt(
        self,
        match_text: Optional[str],
        owner: Optional[str],
        settle_s: float,
        allow_fallback: bool
    ) -> Optional[CompletionSignal]:
        try:
            self._table.refresh()
            if settle_s:
                self._sleep(settle_s)
            row = self._find_row(match_text, owner)
        except (TransientLookupError, PlaywrightError) as e:
            logger.debug(f"[JOB_POLL] Lookup failed this attempt: {e}")
            return None

        if row is None:
            logger.info("[JOB_POLL] ⏳ Job row not found yet")
            return None

        signal = self.completion_signal(row, allow_fallback)
        if signal is None:
            logger.info(f"[JOB_POLL] ⏳ Job still in progress: {row.status_text[:80]}")
        return signal

    def _find_row(self, match_text: Optional[str], owner: Optional[str]) -> Optional[JobRow]:
        for handle in self._table.snapshot():
            try:
                row = handle.read()
            except TransientLookupError as e:
                logger.debug(f"[JOB_POLL] Skipping unreadable row: {e}")
                continue
            if row.matches(match_text, owner):
                return row
        return None
