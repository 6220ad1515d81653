"""Tri-state selection mark."""

from enum import Enum


class Mark(Enum):
    """Selection state of a node.

    Leaves only ever hold UNSELECTED or SELECTED. PARTIALLY_SELECTED is the
    derived state of a directory whose children disagree.
    """
    UNSELECTED = 0
    PARTIALLY_SELECTED = 1
    SELECTED = 2

    @classmethod
    def aggregate(cls, marks) -> 'Mark':
        """Combine the marks of a directory's direct children."""
        marks = list(marks)
        if all(mark is cls.SELECTED for mark in marks):
            return cls.SELECTED
        if all(mark is cls.UNSELECTED for mark in marks):
            return cls.UNSELECTED
        return cls.PARTIALLY_SELECTED

    def toggled(self) -> 'Mark':
        """Mark a click produces: anything short of SELECTED becomes SELECTED."""
        if self is Mark.SELECTED:
            return Mark.UNSELECTED
        return Mark.SELECTED
