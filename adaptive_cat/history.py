"""
Response history access and classification.

The core never stores responses itself. It reads them through a
``ResponseHistoryProvider``: an ordered sequence of question slots, each with
a graded state and an optional mark. Whatever owns the attempt (a database
row, a question engine, a simulation) implements the provider; the core only
reads from it.
"""

import logging
import numbers
from dataclasses import dataclass
from typing import Hashable, List, Optional, Protocol, Sequence, Tuple

from adaptive_cat.domain_types import GradedState, ResponseOutcome

logger = logging.getLogger(__name__)

SlotId = Hashable


class ResponseHistoryProvider(Protocol):
    """Read-only view of the questions administered in one attempt."""

    def ordered_slots(self) -> Sequence[SlotId]:
        """Slots in attempt order; the last one was attempted most recently."""
        ...

    def graded_state(self, slot: SlotId) -> GradedState:
        ...

    def mark(self, slot: SlotId) -> Optional[float]:
        ...


@dataclass(frozen=True)
class SlotRecord:
    """One administered question in an in-memory history."""

    slot: int
    state: GradedState
    mark: Optional[float] = None


class InMemoryResponseHistory:
    """
    ``ResponseHistoryProvider`` backed by a list of slot records.

    Slots are numbered from 1 in the order they are recorded.
    """

    def __init__(self, records: Optional[List[SlotRecord]] = None):
        self._records: List[SlotRecord] = list(records or [])

    @classmethod
    def from_marks(cls, marks: Sequence[Optional[float]]) -> "InMemoryResponseHistory":
        """
        Build a history of graded slots from marks alone.

        A positive mark is recorded as correct, zero or below as wrong, and
        ``None`` as an unanswered slot.
        """
        history = cls()
        for mark in marks:
            if mark is None:
                history.record(GradedState.UNANSWERED)
            elif mark > 0:
                history.record(GradedState.CORRECT_GRADED, mark)
            else:
                history.record(GradedState.WRONG_GRADED, mark)
        return history

    def record(self, state: GradedState, mark: Optional[float] = None) -> int:
        """Append a slot and return its id."""
        slot = len(self._records) + 1
        self._records.append(SlotRecord(slot=slot, state=state, mark=mark))
        return slot

    def ordered_slots(self) -> List[int]:
        return [record.slot for record in self._records]

    def graded_state(self, slot: SlotId) -> GradedState:
        return self._get(slot).state

    def mark(self, slot: SlotId) -> Optional[float]:
        return self._get(slot).mark

    def _get(self, slot: SlotId) -> SlotRecord:
        for record in self._records:
            if record.slot == slot:
                return record
        raise KeyError(f"Unknown slot: {slot!r}")


def trace_message(trace: Optional[List[str]], message: str) -> None:
    """Log a diagnostic message and append it to the trace list, if one was given."""
    logger.debug(message)
    if trace is not None:
        trace.append(message)


def find_last_slot(
    history: ResponseHistoryProvider, trace: Optional[List[str]] = None
) -> Optional[SlotId]:
    """Return the most recently attempted slot, or None for an empty history."""
    slots = history.ordered_slots()
    if not slots:
        trace_message(trace, "find_last_slot() - no question slots found in the history")
        return None

    slot = slots[-1]
    trace_message(trace, f"find_last_slot() - found a question slot: {slot}")
    return slot


def get_question_mark(
    history: ResponseHistoryProvider,
    slot: SlotId,
    trace: Optional[List[str]] = None,
) -> Optional[float]:
    """
    Return the slot's mark as a float, or None when it is missing or not numeric.

    Booleans are not accepted as marks.
    """
    mark = history.mark(slot)

    if isinstance(mark, numbers.Real) and not isinstance(mark, bool):
        return float(mark)

    trace_message(trace, f"get_question_mark() - question mark was not a number, slot: {slot}")
    return None


def classify_last_response(
    history: ResponseHistoryProvider, trace: Optional[List[str]] = None
) -> ResponseOutcome:
    """
    Classify the outcome of the most recently attempted question.

    An unanswered (or otherwise ungraded) final question counts as incorrect
    rather than abstaining. Partial credit counts as correct if and only if
    its mark is strictly positive.

    Args:
        history: The attempt's response history.
        trace: Optional list collecting diagnostic messages.

    Returns:
        CORRECT, INCORRECT, or UNDETERMINED when there is no slot or its mark
        is missing.
    """
    slot = find_last_slot(history, trace)
    if slot is None:
        return ResponseOutcome.UNDETERMINED

    state = history.graded_state(slot)
    if not state.is_graded:
        trace_message(
            trace,
            f"classify_last_response() - question state is not graded: "
            f"{state.value}, slot: {slot}",
        )
        return ResponseOutcome.INCORRECT

    mark = get_question_mark(history, slot, trace)
    if mark is None:
        return ResponseOutcome.UNDETERMINED

    if mark > 0.0:
        return ResponseOutcome.CORRECT
    return ResponseOutcome.INCORRECT


def count_responses(
    history: ResponseHistoryProvider, trace: Optional[List[str]] = None
) -> Tuple[int, int]:
    """
    Count correct and incorrect answers across the whole history.

    A slot with a positive mark is correct; a slot with no mark or a mark of
    zero or below is incorrect.

    Returns:
        Tuple of (sum_correct, sum_incorrect).
    """
    sum_correct = 0
    sum_incorrect = 0

    for slot in history.ordered_slots():
        mark = get_question_mark(history, slot, trace)
        if mark is not None and mark > 0.0:
            sum_correct += 1
        else:
            sum_incorrect += 1

    trace_message(
        trace,
        f"count_responses() - correct answers: {sum_correct}, "
        f"incorrect answers: {sum_incorrect}",
    )
    return (sum_correct, sum_incorrect)
