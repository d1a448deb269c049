"""
Drag-and-drop reordering of the schema field list.
"""

from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def is_valid_move(length: int, source_index: Optional[int], destination_index: Optional[int]) -> bool:
    """Return True when the move would change the order of a list of the given length."""
    if source_index is None or destination_index is None:
        # Released outside any drop target
        return False
    if not (0 <= source_index < length) or not (0 <= destination_index < length):
        return False
    return source_index != destination_index


def reorder_fields(items: Sequence[T], source_index: Optional[int],
                   destination_index: Optional[int]) -> List[T]:
    """
    Move the element at source_index to destination_index.

    Standard list-splice semantics: the element is removed, the rest close the
    gap, and it is reinserted at destination_index. Out-of-range or missing
    indices and source == destination return an unchanged copy.

    Args:
        items: Current ordered items
        source_index: Index of the dragged item
        destination_index: Index where the item was dropped

    Returns:
        New list with the same members
    """
    reordered = list(items)
    if not is_valid_move(len(reordered), source_index, destination_index):
        return reordered

    moved = reordered.pop(source_index)
    reordered.insert(destination_index, moved)
    return reordered
