"""
Base algorithm interface and the algorithm registry.

All algorithms inherit from BaseAlgorithm and return a StepTrace.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple

from ..input.tokenizer import Tokenizer
from ..models import Algorithm, StepTrace, Token
from ..utils.errors import NotationError

logger = logging.getLogger(__name__)


class BaseAlgorithm(ABC):
    """
    Abstract base class for the instrumented stack algorithms.

    A run is tokenize, validate, execute. Instances keep no per-run
    state, so one instance can be reused for any number of runs.
    """

    algorithm: Algorithm

    # Human-readable name for this algorithm
    name: str = "BaseAlgorithm"

    # Description of what this algorithm does
    description: str = "Base algorithm class"

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        self.tokenizer = tokenizer or Tokenizer()

    @abstractmethod
    def can_run(self, tokens: Sequence[Token]) -> bool:
        """
        Check if the tokens look like this algorithm's input notation.

        Used for automatic detection only; ``run`` does its own validation.
        """

    @abstractmethod
    def validate(self, tokens: Sequence[Token]) -> None:
        """Raise a NotationError if the tokens cannot be processed."""

    @abstractmethod
    def execute(self, expression: str, tokens: Sequence[Token]) -> StepTrace:
        """Run the algorithm over validated tokens and return its trace."""

    def run(self, expression: str) -> StepTrace:
        """
        Tokenize, validate and execute an expression.

        Raises:
            NotationError: on any malformed input. No partial trace is
            returned alongside an error.
        """
        start = time.perf_counter()
        try:
            tokens = self.tokenizer.tokenize(expression)
            self.validate(tokens)
            trace = self.execute(expression, tokens)
        except NotationError as e:
            logger.debug("%s rejected %r: %s (%s)", self.name, expression, e, e.kind.value)
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "%s ran %r: %d tokens, %d steps in %.2fms",
            self.name,
            expression,
            len(tokens),
            len(trace),
            elapsed_ms,
        )
        return trace

    def try_run(self, expression: str) -> Tuple[Optional[StepTrace], Optional[NotationError]]:
        """
        Attempt a run, returning the error instead of raising.

        Returns:
            Tuple of (trace or None, error or None)
        """
        try:
            return self.run(expression), None
        except NotationError as e:
            return None, e


class AlgorithmRegistry:
    """
    Registry of available algorithms.

    Maintains priority order for automatic detection.
    """

    def __init__(self):
        self._algorithms: List[Tuple[int, BaseAlgorithm]] = []
        self._by_key: Dict[Algorithm, BaseAlgorithm] = {}

    def register(self, algorithm: BaseAlgorithm, priority: int = 100):
        """
        Register an algorithm with given priority (lower = higher priority).
        """
        self._algorithms.append((priority, algorithm))
        self._algorithms.sort(key=lambda x: x[0])
        self._by_key[algorithm.algorithm] = algorithm

    def get(self, key) -> BaseAlgorithm:
        """
        Look up an algorithm by Algorithm member or its string value.

        Raises:
            KeyError: if nothing is registered under that key.
        """
        if not isinstance(key, Algorithm):
            try:
                key = Algorithm(key)
            except ValueError:
                raise KeyError(f"Unknown algorithm: {key}") from None
        return self._by_key[key]

    def detect(self, expression: str) -> Optional[BaseAlgorithm]:
        """
        Get the highest-priority algorithm whose notation matches.

        Raises LexError if the expression cannot be tokenized.
        """
        tokens = Tokenizer().tokenize(expression)
        for _, algorithm in self._algorithms:
            if algorithm.can_run(tokens):
                logger.debug("Detected %s for %r", algorithm.name, expression)
                return algorithm
        return None

    def run(self, expression: str, key=None) -> StepTrace:
        """Run ``expression`` through the named algorithm, or a detected one."""
        if key is None:
            algorithm = self.detect(expression)
            if algorithm is None:
                algorithm = self.get(Algorithm.INFIX_TO_POSTFIX)
        else:
            algorithm = self.get(key)
        return algorithm.run(expression)

    @property
    def algorithms(self) -> List[BaseAlgorithm]:
        """Get all registered algorithms in priority order."""
        return [algorithm for _, algorithm in self._algorithms]
