"""
Decorator Chain Evaluator.

Given decorators ``[d1, ..., dn]`` in source order, the chain is composed
like nested function calls: ``dn`` sees the initial value first and ``d1``
is applied last, observing everything beneath it. Decorator expressions
are still *evaluated* in source order; only their application runs
innermost-first. The same :class:`ChainPlan` drives the Python evaluator
here and the emitted JavaScript, so both agree on ordering.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from decolower.core.descriptors import carry_forward
from decolower.core.error_handling import ChainError, ContractViolationError, DecoLowerError
from decolower.core.outcome import Keep, Outcome, Replace, outcome_of
from decolower.models.descriptor import PropertyDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainStep:
    """One decorator of a chain and its 0-based position in source order"""
    position: int
    decorator: Any


@dataclass
class ChainPlan:
    """Evaluation and application order for one decorator list"""
    steps: List[ChainStep] = field(default_factory=list)

    @classmethod
    def for_decorators(cls, decorators: Sequence[Any]) -> 'ChainPlan':
        return cls([ChainStep(i, d) for i, d in enumerate(decorators)])

    @property
    def evaluation_order(self) -> List[ChainStep]:
        return list(self.steps)

    @property
    def application_order(self) -> List[ChainStep]:
        return list(reversed(self.steps))

    def __len__(self) -> int:
        return len(self.steps)


@dataclass
class Invocation:
    """Record of one decorator application"""
    position: int
    label: str
    replaced: bool


@dataclass
class ChainResult:
    """Final value of a chain and whether any decorator replaced it"""
    value: Any
    replaced: bool = False
    invocations: List[Invocation] = field(default_factory=list)


class DecoratorChainEvaluator:
    """
    Applies resolved decorator functions to a target/key/descriptor triple
    (member level) or to a constructor (class level).
    """

    def evaluate_member(
        self,
        target: Any,
        key: Any,
        decorators: Sequence[Callable],
        initial: PropertyDescriptor,
        labels: Optional[Sequence[str]] = None,
        location: Any = None,
    ) -> ChainResult:
        """
        Thread ``initial`` through ``decorators`` innermost-first.

        Args:
            target: Object the property lives on (prototype, constructor or literal)
            key: Realized property key
            decorators: Resolved decorator functions in source order
            initial: Descriptor implied by the bare syntax
            labels: Optional source text of each decorator, for diagnostics
            location: Optional source location, for diagnostics

        Returns:
            ChainResult holding the final descriptor

        Raises:
            ChainError: If a decorator raises
            ContractViolationError: If a decorator returns a non-descriptor
        """
        plan = ChainPlan.for_decorators(decorators)
        current = initial
        result = ChainResult(value=initial)
        for step in plan.application_order:
            label = self._label(step, labels)
            outcome = self._invoke(step.decorator, (target, key, current), label, key, location)
            current = carry_forward(current, outcome, decorator=label, key=key, location=location)
            self._record(result, step, label, outcome)
        result.value = current
        logger.debug(f'Member chain for {key!r} finished: {len(plan)} decorators, replaced={result.replaced}')
        return result

    def evaluate_class(
        self,
        constructor: Any,
        decorators: Sequence[Callable],
        labels: Optional[Sequence[str]] = None,
        location: Any = None,
    ) -> ChainResult:
        """
        Thread a constructor through class decorators innermost-first.
        A decorator returning nothing keeps the current constructor.

        Raises:
            ChainError: If a decorator raises
            ContractViolationError: If a decorator returns a non-constructor value
        """
        plan = ChainPlan.for_decorators(decorators)
        current = constructor
        result = ChainResult(value=constructor)
        for step in plan.application_order:
            label = self._label(step, labels)
            outcome = self._invoke(step.decorator, (current,), label, None, location)
            if isinstance(outcome, Replace):
                if not callable(outcome.value):
                    raise ContractViolationError(
                        outcome.value, 'a constructor or nothing', decorator=label, location=location
                    )
                current = outcome.value
            self._record(result, step, label, outcome)
        result.value = current
        logger.debug(f'Class chain finished: {len(plan)} decorators, replaced={result.replaced}')
        return result

    def install(self, target: Any, key: Any, result: ChainResult) -> bool:
        """
        Install the final descriptor on ``target`` when the chain replaced it.

        Returns:
            True if a define-property call was made
        """
        if not result.replaced:
            logger.debug(f'No decorator replaced the descriptor for {key!r}; skipping install')
            return False
        target.define_property(key, result.value)
        return True

    @staticmethod
    def _label(step: ChainStep, labels: Optional[Sequence[str]]) -> str:
        if labels is not None and step.position < len(labels):
            return labels[step.position]
        return getattr(step.decorator, '__name__', repr(step.decorator))

    @staticmethod
    def _invoke(decorator: Any, args: tuple, label: str, key: Any, location: Any) -> Outcome:
        if not callable(decorator):
            raise ChainError(f"Decorator '{label}' is not callable", decorator=label, key=key, location=location)
        try:
            returned = decorator(*args)
        except DecoLowerError:
            raise
        except Exception as e:
            raise ChainError(
                f"Decorator '{label}' raised {type(e).__name__}: {e}", decorator=label, key=key, location=location
            ) from e
        return outcome_of(returned)

    @staticmethod
    def _record(result: ChainResult, step: ChainStep, label: str, outcome: Outcome) -> None:
        replaced = not isinstance(outcome, Keep)
        result.replaced = result.replaced or replaced
        result.invocations.append(Invocation(step.position, label, replaced))
        logger.debug(f"Applied decorator #{step.position} '{label}': {'replace' if replaced else 'keep'}")
