"""
Ordered Fallback Strategies

A fallback chain is a list of named strategies evaluated in priority
order; the first one returning a non-empty value wins.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Strategy:
    """A named extraction step. fn returns an empty value for "no match"."""
    name: str
    fn: Callable[..., Any]

    def __call__(self, *args, **kwargs) -> Any:
        return self.fn(*args, **kwargs)


def first_match(
    strategies: Iterable[Strategy],
    *args,
    default: Any = None,
    **kwargs,
) -> Tuple[Optional[str], Any]:
    """
    Evaluate strategies in order until one returns a non-empty value.

    A strategy that trips over malformed input (ValueError, TypeError,
    KeyError, AttributeError) counts as no match and the chain continues.

    Args:
        strategies: Ordered strategies
        *args, **kwargs: Passed to every strategy
        default: Value returned when nothing matches

    Returns:
        (strategy name, value) of the winner, or (None, default)
    """
    for strategy in strategies:
        try:
            value = strategy(*args, **kwargs)
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.debug("Strategy %s failed: %s", strategy.name, e)
            continue
        if value:
            return strategy.name, value
    return None, default
