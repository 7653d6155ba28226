"""
Clock-free playback over a finished trace.

A view is a pure function of (trace, cursor). Whoever drives playback
(a timer, a key press, a test) just moves the cursor.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from ..models import Number, StepRecord, StepTrace
from ..utils.constants import resolve_rule_path
from .exporter import format_final, log_lines


@dataclass(frozen=True)
class PlaybackView:
    """Everything a display needs for one position in a trace."""

    cursor: int
    total: int
    step: StepRecord
    rule_texts: Tuple[str, ...]
    log: Tuple[str, ...]
    final_output: Optional[Union[str, Number]] = None  # Only set on the last step

    @property
    def is_first(self) -> bool:
        return self.cursor == 0

    @property
    def is_last(self) -> bool:
        return self.cursor == self.total - 1


def clamp_cursor(trace: StepTrace, cursor: int) -> int:
    return max(0, min(cursor, len(trace) - 1))


def view_at(trace: StepTrace, cursor: int) -> PlaybackView:
    """
    Build the view for ``cursor``, clamped to the trace bounds.

    The log lists the token steps up to the cursor, plus the final result
    line once the last step is reached.
    """
    cursor = clamp_cursor(trace, cursor)
    step = trace.steps[cursor]
    is_last = cursor == len(trace) - 1

    log = log_lines(trace, upto=cursor)
    if is_last:
        log.append(format_final(trace))

    return PlaybackView(
        cursor=cursor,
        total=len(trace),
        step=step,
        rule_texts=tuple(resolve_rule_path(trace.algorithm.value, step.rule_ref)),
        log=tuple(log),
        final_output=trace.final_output if is_last else None,
    )


class TracePlayer:
    """
    Cursor over a StepTrace.

    Usage:
        player = TracePlayer(evaluate_prefix("- + * 5 3 8 / 4 2"))
        while not player.at_end:
            view = player.next()
    """

    def __init__(self, trace: StepTrace, cursor: int = 0):
        self.trace = trace
        self.cursor = clamp_cursor(trace, cursor)

    @property
    def at_end(self) -> bool:
        return self.cursor == len(self.trace) - 1

    @property
    def at_start(self) -> bool:
        return self.cursor == 0

    def current(self) -> PlaybackView:
        return view_at(self.trace, self.cursor)

    def next(self) -> PlaybackView:
        """Advance one step; stays put at the end."""
        return self.seek(self.cursor + 1)

    def previous(self) -> PlaybackView:
        """Go back one step; stays put at the start."""
        return self.seek(self.cursor - 1)

    def seek(self, cursor: int) -> PlaybackView:
        self.cursor = clamp_cursor(self.trace, cursor)
        return self.current()

    def reset(self) -> PlaybackView:
        return self.seek(0)

    def __iter__(self) -> Iterator[PlaybackView]:
        """Yield views from the current cursor to the end, advancing it."""
        yield self.current()
        while not self.at_end:
            yield self.next()
