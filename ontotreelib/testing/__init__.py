"""Testing utilities for OntoTreeLib consumers."""

from .fixtures import (
    CacheTestHelper,
    FakeHierarchySource,
    ManualClock,
    RecordingPresenter,
    TickingClock,
)

__all__ = ['CacheTestHelper', 'FakeHierarchySource', 'ManualClock', 'RecordingPresenter',
           'TickingClock']
