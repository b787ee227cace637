"""
Escalating process terminator.

Each pid goes through an explicit state machine::

    REQUEST(step) -> WAIT -> PROBE -> TERMINATED
                                   -> REQUEST(next step)
                                   -> FAILED

After the machine settles, the handle's port is re-checked. An outcome only
counts as a success when the pid is gone and the port is free.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from .config.settings import DEFAULT_SIGNAL_WAIT_SECONDS
from .errors import TerminationPermissionError
from .process_models import ProcessHandle, TerminationOutcome
from .terminator_helpers.liveness import pid_is_alive
from .terminator_helpers.signal_plan import EscalationStep, default_escalation
from .terminator_helpers.signal_sender import send_step

logger = logging.getLogger(__name__)

SignalSender = Callable[[int, EscalationStep], None]
LivenessProbe = Callable[[int], bool]
PortProbe = Callable[[int], Awaitable[bool]]
Sleep = Callable[[float], Awaitable[None]]
OutcomeCallback = Callable[[TerminationOutcome], None]
StartCallback = Callable[[ProcessHandle], None]


class TerminationState(enum.Enum):
    REQUEST = "request"
    WAIT = "wait"
    PROBE = "probe"
    TERMINATED = "terminated"
    FAILED = "failed"


_FINAL_STATES = (TerminationState.TERMINATED, TerminationState.FAILED)


class Terminator:
    """Terminate processes with escalating signals and verify the port is released."""

    def __init__(
        self,
        *,
        port_probe: PortProbe,
        signal_sender: SignalSender = send_step,
        liveness_probe: LivenessProbe = pid_is_alive,
        sleep: Sleep = asyncio.sleep,
        wait_seconds: float = DEFAULT_SIGNAL_WAIT_SECONDS,
        escalation: Optional[Sequence[EscalationStep]] = None,
    ) -> None:
        self._port_probe = port_probe
        self._signal_sender = signal_sender
        self._liveness_probe = liveness_probe
        self._sleep = sleep
        self._wait_seconds = wait_seconds
        self._escalation = tuple(escalation) if escalation is not None else default_escalation()
        if not self._escalation:
            raise ValueError("Escalation ladder must contain at least one step")

    async def terminate(self, handle: ProcessHandle) -> TerminationOutcome:
        """Run the escalation for ``handle`` and verify its port was released."""
        error: Optional[Exception]
        try:
            terminated, error = await self._escalate(handle.pid)
        except OSError as exc:
            logger.warning("Unexpected OS error terminating PID %s: %s", handle.pid, exc)
            terminated, error = False, exc

        port_still_bound = await self._port_probe(handle.port)
        if terminated and port_still_bound:
            logger.warning("PID %s exited but port %s is still bound", handle.pid, handle.port)
        return TerminationOutcome(handle=handle, terminated=terminated, port_still_bound=port_still_bound, error=error)

    async def terminate_many(
        self,
        handles: Sequence[ProcessHandle],
        *,
        concurrent: bool = False,
        on_start: Optional[StartCallback] = None,
        on_outcome: Optional[OutcomeCallback] = None,
    ) -> List[TerminationOutcome]:
        """
        Terminate every handle, reporting each outcome as soon as it is known.

        Args:
            handles: Processes selected by the operator
            concurrent: Run all escalations at once instead of one after another
            on_start: Called as each attempt begins
            on_outcome: Called once per finished attempt

        Returns:
            Outcomes in the same order as ``handles``
        """

        async def _run(handle: ProcessHandle) -> TerminationOutcome:
            if on_start is not None:
                on_start(handle)
            outcome = await self.terminate(handle)
            if on_outcome is not None:
                on_outcome(outcome)
            return outcome

        if concurrent:
            return list(await asyncio.gather(*(_run(handle) for handle in handles)))

        outcomes = []
        for handle in handles:
            outcomes.append(await _run(handle))
        return outcomes

    async def _escalate(self, pid: int) -> Tuple[bool, Optional[Exception]]:
        state = TerminationState.REQUEST
        index = 0
        last_index = len(self._escalation) - 1
        error: Optional[Exception] = None

        while state not in _FINAL_STATES:
            step = self._escalation[index]
            logger.debug("PID %s: %s (%s)", pid, state.value, step.name)

            if state is TerminationState.REQUEST:
                try:
                    self._signal_sender(pid, step)
                except ProcessLookupError:
                    state = TerminationState.TERMINATED
                except PermissionError:
                    if index == last_index:
                        error = TerminationPermissionError(pid, step.name)
                        state = TerminationState.FAILED
                    else:
                        logger.debug("Permission denied for %s on PID %s; escalating", step.name, pid)
                        index += 1
                else:
                    state = TerminationState.WAIT

            elif state is TerminationState.WAIT:
                await self._sleep(self._wait_seconds)
                state = TerminationState.PROBE

            elif state is TerminationState.PROBE:
                if not self._liveness_probe(pid):
                    state = TerminationState.TERMINATED
                elif index == last_index:
                    state = TerminationState.FAILED
                else:
                    index += 1
                    state = TerminationState.REQUEST

        logger.debug("PID %s: %s", pid, state.value)
        return state is TerminationState.TERMINATED, error


__all__ = ["Terminator", "TerminationState"]
