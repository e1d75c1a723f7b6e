"""Run controller: one prompt in, one finished assistant turn out.

State machine per submission:

    idle -> submitting -> streaming -> completed | cancelled | errored -> idle

Only one run is active at a time. Whatever way a run ends, the controller
returns to idle and the assistant turn reaches a final status with the
partial content it had accumulated.
"""

import asyncio
import time
from collections.abc import AsyncGenerator, Callable
from contextlib import aclosing
from enum import Enum

from pydantic import BaseModel, ConfigDict

from gist.conversation.history import build_history
from gist.conversation.models import Turn, now_ms
from gist.conversation.store import ConversationNotFoundError, TurnNotFoundError
from gist.conversation.view import ConversationView
from gist.observability.logging import get_logger
from gist.observability.metrics import RUN_DURATION, RUN_OUTCOMES
from gist.streaming.events import AgentEvent, AgentRunRequest, DoneEvent
from gist.streaming.reducer import (
    Completed,
    DraftState,
    ReduceStep,
    cancel,
    initial_state,
    reduce,
)
from gist.streaming.transport import AgentTransport, StreamIdleTimeout

logger = get_logger(__name__)


class RunState(str, Enum):
    """Run controller states."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ERRORED = "errored"


class RunOutcome(BaseModel):
    """What happened to one submission."""

    model_config = ConfigDict(frozen=True)

    accepted: bool
    state: RunState
    conversation_id: str | None = None
    user_turn_id: str | None = None
    assistant_turn_id: str | None = None
    error: str | None = None


class RunController:
    """Drives a single agent run from submission to final turn status.

    Args:
        view: Conversation view that owns the in-memory transcript
        transport: Source of decoded agent events for a run request
        idle_timeout: Fail the run when no event arrives for this many seconds
        clock: Epoch-millisecond clock used for turn timestamps
    """

    def __init__(
        self,
        view: ConversationView,
        transport: AgentTransport,
        *,
        idle_timeout: float | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._view = view
        self._transport = transport
        self._idle_timeout = idle_timeout
        self._clock = clock

        self._state = RunState.IDLE
        self._task: asyncio.Task[None] | None = None
        self._stop_requested = False
        self._discarded = False
        self._started_at: float | None = None
        self._draft: DraftState = initial_state()

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state != RunState.IDLE

    @property
    def elapsed(self) -> float | None:
        """Seconds since the active run started streaming."""
        if self._started_at is None:
            return None
        return time.monotonic() - self._started_at

    def stop(self) -> bool:
        """Abort the active run. Returns False when nothing is streaming."""
        if self._task is None or self._task.done():
            return False
        self._stop_requested = True
        self._task.cancel()
        logger.info("run_stop_requested")
        return True

    async def submit(self, prompt: str, conversation_id: str | None = None) -> RunOutcome:
        """Submit a prompt and stream the agent's answer into the conversation.

        Creates the conversation first when it does not exist yet. Returns
        an outcome with ``accepted=False`` for a blank prompt or while
        another run is active.
        """
        text = prompt.strip()
        if not text or self.is_active:
            logger.info(
                "run_rejected",
                reason="empty_prompt" if not text else "run_active",
            )
            return RunOutcome(accepted=False, state=self._state, conversation_id=conversation_id)

        self._state = RunState.SUBMITTING
        self._stop_requested = False
        self._discarded = False
        self._draft = initial_state()
        outcome = RunState.CANCELLED
        error: str | None = None

        try:
            if conversation_id is None or self._view.get(conversation_id) is None:
                conversation_id = self._view.create_conversation(conversation_id)

            prior = self._view.turns(conversation_id)
            history = build_history(prior)
            created_at = self._clock()
            if prior:
                # Keep this run strictly after the previous one
                created_at = max(created_at, prior[-1].created_at + 1)
            user_turn = Turn.user(text, created_at=created_at)
            assistant_turn = Turn.assistant_placeholder(created_at=created_at + 1)
            self._view.add_turn(conversation_id, user_turn)
            self._view.add_turn(conversation_id, assistant_turn)

            request = AgentRunRequest(prompt=text, history=history)
            self._state = RunState.STREAMING
            self._started_at = time.monotonic()
            logger.info(
                "run_started",
                conversation_id=conversation_id,
                turn_id=assistant_turn.id,
                history_length=len(history),
            )

            self._task = asyncio.create_task(
                self._consume(conversation_id, assistant_turn.id, request)
            )
            try:
                await self._task
            except asyncio.CancelledError:
                self._apply(conversation_id, assistant_turn.id, cancel(self._draft))
                outcome = RunState.CANCELLED
                if not self._stop_requested:
                    raise
                logger.info("run_cancelled", turn_id=assistant_turn.id)
            except Exception as e:
                error = str(e) or type(e).__name__
                self._apply(
                    conversation_id,
                    assistant_turn.id,
                    cancel(self._draft, connection_error=True),
                )
                outcome = RunState.ERRORED
                logger.warning(
                    "run_stream_failed",
                    turn_id=assistant_turn.id,
                    error=error,
                    error_type=type(e).__name__,
                )
            else:
                if self._discarded:
                    outcome = RunState.CANCELLED
                elif isinstance(self._draft, Completed):
                    outcome = RunState.COMPLETED
                else:
                    # Stream ended without a result event
                    self._apply(conversation_id, assistant_turn.id, cancel(self._draft))
                    outcome = RunState.CANCELLED
                logger.info("run_finished", turn_id=assistant_turn.id, outcome=outcome.value)

            self._state = outcome
            return RunOutcome(
                accepted=True,
                state=outcome,
                conversation_id=conversation_id,
                user_turn_id=user_turn.id,
                assistant_turn_id=assistant_turn.id,
                error=error,
            )
        finally:
            if self._started_at is not None:
                RUN_DURATION.labels(outcome=outcome.value).observe(
                    time.monotonic() - self._started_at
                )
                RUN_OUTCOMES.labels(outcome=outcome.value).inc()
            self._task = None
            self._started_at = None
            self._stop_requested = False
            self._state = RunState.IDLE

    async def _consume(self, conversation_id: str, turn_id: str, request: AgentRunRequest) -> None:
        async with aclosing(self._transport.stream(request)) as events:
            while True:
                try:
                    event = await self._next_event(events)
                except StopAsyncIteration:
                    return
                self._apply(conversation_id, turn_id, reduce(self._draft, event))
                if self._discarded or isinstance(event, DoneEvent):
                    return

    async def _next_event(self, events: AsyncGenerator[AgentEvent, None]) -> AgentEvent:
        if self._idle_timeout is None:
            return await anext(events)
        try:
            async with asyncio.timeout(self._idle_timeout):
                return await anext(events)
        except TimeoutError:
            raise StreamIdleTimeout(self._idle_timeout) from None

    def _apply(self, conversation_id: str, turn_id: str, step: ReduceStep) -> None:
        """Advance the draft and push its patch into the view.

        A conversation deleted mid-run leaves nothing to update; the run
        is marked discarded and later patches are dropped.
        """
        self._draft = step.state
        if step.patch is None or self._discarded:
            return
        try:
            self._view.update_turn(conversation_id, turn_id, step.patch)
        except (ConversationNotFoundError, TurnNotFoundError):
            self._discarded = True
            logger.warning(
                "run_turn_discarded", conversation_id=conversation_id, turn_id=turn_id
            )
