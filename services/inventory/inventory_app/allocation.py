"""
Batch allocation strategies for the Inventory service.

Given candidate batches and a requested quantity, the engine produces a plan
of allocation lines (which batch, how much). It never mutates the batches it
is given; callers apply the plan.
"""
import enum
from typing import List, NamedTuple, Sequence, Union

from .exceptions import InsufficientInventory, InvalidRequest


class AllocationStrategy(str, enum.Enum):
    """Allocation policies, selected by name."""
    FIFO = "FIFO"
    LIFO = "LIFO"
    EXPIRY = "EXPIRY"


class AllocationLine(NamedTuple):
    """Quantity to take from a single batch."""
    batch_id: str
    quantity: int


def get_strategy(name: Union[str, AllocationStrategy]) -> AllocationStrategy:
    """
    Resolve a strategy name.

    Args:
        name: Strategy name ("FIFO", "LIFO" or "EXPIRY")

    Returns:
        The matching AllocationStrategy

    Raises:
        InvalidRequest: If the name is not a known strategy
    """
    try:
        return AllocationStrategy(name)
    except ValueError:
        raise InvalidRequest(f"Unknown strategy: {name}") from None


def sort_by_expiry(batches: Sequence) -> list:
    """Return the batches ordered by ascending expiry date, keeping ties in input order."""
    return sorted(batches, key=lambda batch: batch.expiry_date)


def _walk(batches: Sequence, quantity_needed: int) -> List[AllocationLine]:
    lines = []
    remaining = quantity_needed

    for batch in batches:
        if remaining <= 0:
            break
        if batch.quantity <= 0:
            continue
        to_allocate = min(batch.quantity, remaining)
        lines.append(AllocationLine(batch.batch_id, to_allocate))
        remaining -= to_allocate

    if remaining > 0:
        raise InsufficientInventory(
            f"Insufficient inventory available. Short by {remaining} of {quantity_needed}"
        )
    return lines


def allocate(
    batches: Sequence,
    quantity_needed: int,
    strategy: Union[str, AllocationStrategy] = AllocationStrategy.FIFO,
) -> List[AllocationLine]:
    """
    Plan which batches satisfy a requested quantity.

    FIFO walks the batches in the order given, which callers keep ascending
    by expiry. LIFO walks them in reverse. Each line carries only the
    quantity taken from that batch; empty batches get no line. EXPIRY does not partition: it returns
    one line per batch, ascending by expiry, with the batch's full quantity.

    Args:
        batches: Candidate batches (anything with batch_id, quantity, expiry_date)
        quantity_needed: Non-negative quantity to allocate
        strategy: Strategy or strategy name

    Returns:
        Ordered list of allocation lines

    Raises:
        InvalidRequest: If the strategy is unknown or the quantity is negative
        InsufficientInventory: If FIFO/LIFO cannot cover quantity_needed
    """
    strategy = get_strategy(strategy)
    if quantity_needed < 0:
        raise InvalidRequest("Quantity must not be negative")

    if strategy is AllocationStrategy.EXPIRY:
        return [AllocationLine(b.batch_id, b.quantity) for b in sort_by_expiry(batches)]
    if strategy is AllocationStrategy.LIFO:
        return _walk(list(reversed(batches)), quantity_needed)
    return _walk(batches, quantity_needed)
