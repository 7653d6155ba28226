"""
Step trace recording.

Collects step records while an algorithm runs and freezes them into a
StepTrace when it finishes.
"""

from typing import List, Optional, Sequence, Tuple, Union

from ..models import Algorithm, Number, StepRecord, StepTrace, Token


def snapshot(value) -> Union[tuple, str]:
    """Copy a live stack or output accumulator into an immutable value."""
    if isinstance(value, str):
        return value
    return tuple(value)


class TraceRecorder:
    """
    Append-only builder for a StepTrace.

    One recorder belongs to one run; ``finish`` may be called once.
    """

    def __init__(self, algorithm: Algorithm, expression: str, tokens: Sequence[Token]):
        self.algorithm = algorithm
        self.expression = expression
        self.tokens = tuple(tokens)
        self._steps: List[StepRecord] = []
        self._finished = False

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def last_output(self) -> Union[tuple, str, None]:
        return self._steps[-1].output_snapshot if self._steps else None

    def record(
        self,
        *,
        token: Optional[Token],
        stack,
        output,
        explanation: str,
        rule_ref: Tuple[int, ...],
        operands: Optional[Tuple[Number, Number]] = None,
        result: Optional[Number] = None,
        token_index: int = -1,
    ) -> StepRecord:
        """
        Snapshot the current stack and output as the next step.

        ``changed`` is derived by comparing the output with the previous
        record's output.
        """
        if self._finished:
            raise RuntimeError("Cannot record steps on a finished trace")

        output_snapshot = snapshot(output)
        previous = self.last_output
        step = StepRecord(
            step_number=len(self._steps),
            token=token.text if token is not None else None,
            stack_snapshot=snapshot(stack),
            output_snapshot=output_snapshot,
            explanation=explanation,
            rule_ref=tuple(rule_ref),
            changed=previous is not None and output_snapshot != previous,
            token_index=token_index,
            operands=operands,
            result=result,
        )
        self._steps.append(step)
        return step

    def finish(self, final_output: Union[str, Number]) -> StepTrace:
        """Freeze the recorded steps into a StepTrace."""
        if self._finished:
            raise RuntimeError("Trace already finished")
        self._finished = True
        return StepTrace(
            algorithm=self.algorithm,
            expression=self.expression,
            tokens=self.tokens,
            steps=tuple(self._steps),
            final_output=final_output,
        )
