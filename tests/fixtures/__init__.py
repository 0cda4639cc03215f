"""Test fixtures package."""

from .factories import UNIT_CONDITION, PriorityAssignmentFactory, RoomDocumentFactory, SlaAssignmentFactory
from .mixins import AssertionMixin, BaseTestCase, MockHelperMixin

__all__ = [
    "UNIT_CONDITION",
    "PriorityAssignmentFactory",
    "RoomDocumentFactory",
    "SlaAssignmentFactory",
    # Test base classes
    "AssertionMixin",
    "BaseTestCase",
    "MockHelperMixin",
]
