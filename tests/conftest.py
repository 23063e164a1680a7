"""
Test fixtures for the DataTree test suite.

Provides:
- Flat and nested mock node lists
- Loaded DataTree instances
- An event recorder for diagnostics
"""

import json
from pathlib import Path
from typing import List

import pytest

from datatree.core import DataTree
from datatree.managers.events import Event, EventListener, EventType


# =============================================================================
# Mock Data
# =============================================================================


def region_nodes() -> List[dict]:
    """Flat region list.

    Structure:
        1 China
        ├── 3 North ── 12..16
        ├── 4 Northeast
        ├── 5 East ── 17, 18 Fujian ── 22..26, 19, 20, 21
        ├── 6..10
        2 Abroad
        └── 11 Japan
    """
    return [
        {"id": 1, "text": "China"},
        {"id": 2, "text": "Abroad"},
        {"id": 3, "text": "North", "pid": 1},
        {"id": 4, "text": "Northeast", "pid": 1},
        {"id": 5, "text": "East", "pid": 1},
        {"id": 6, "text": "Central", "pid": 1},
        {"id": 7, "text": "South", "pid": 1},
        {"id": 8, "text": "Southwest", "pid": 1},
        {"id": 9, "text": "Northwest", "pid": 1},
        {"id": 10, "text": "Other", "pid": 1},
        {"id": 11, "text": "Japan", "pid": 2},
        {"id": 12, "text": "Beijing", "pid": 3},
        {"id": 13, "text": "Tianjin", "pid": 3},
        {"id": 14, "text": "Hebei", "pid": 3},
        {"id": 15, "text": "Inner Mongolia", "pid": 3},
        {"id": 16, "text": "Shanxi", "pid": 3},
        {"id": 17, "text": "Shanghai", "pid": 5},
        {"id": 18, "text": "Fujian", "pid": 5},
        {"id": 19, "text": "Jiangsu", "pid": 5},
        {"id": 20, "text": "Jiangxi", "pid": 5},
        {"id": 21, "text": "Zhejiang", "pid": 5},
        {"id": 22, "text": "Fuzhou", "pid": 18},
        {"id": 23, "text": "Ningde", "pid": 18},
        {"id": 24, "text": "Sanming", "pid": 18},
        {"id": 25, "text": "Xiamen", "pid": 18},
        {"id": 26, "text": "Longcheng", "pid": 18},
    ]


def chain_nodes() -> List[dict]:
    """Flat 1 -> 2 -> (3, 4)."""
    return [
        {"id": 1, "text": "Root"},
        {"id": 2, "text": "Middle", "pid": 1},
        {"id": 3, "text": "Leaf A", "pid": 2},
        {"id": 4, "text": "Leaf B", "pid": 2},
    ]


def chain_nested() -> List[dict]:
    """Nested form of chain_nodes."""
    return [
        {
            "id": 1,
            "text": "Root",
            "child": [
                {
                    "id": 2,
                    "text": "Middle",
                    "child": [
                        {"id": 3, "text": "Leaf A"},
                        {"id": 4, "text": "Leaf B"},
                    ],
                }
            ],
        }
    ]


@pytest.fixture
def regions() -> List[dict]:
    return region_nodes()


@pytest.fixture
def chain() -> List[dict]:
    return chain_nodes()


@pytest.fixture
def nested_chain() -> List[dict]:
    return chain_nested()


# =============================================================================
# Tree Fixtures
# =============================================================================


@pytest.fixture
def tree() -> DataTree:
    """Empty DataTree."""
    return DataTree()


@pytest.fixture
def region_tree(regions) -> DataTree:
    """DataTree loaded with the region list."""
    tree = DataTree()
    tree.load(regions)
    return tree


@pytest.fixture
def small_tree() -> DataTree:
    """DataTree loaded with 1 -> (2, 3 -> 4)."""
    tree = DataTree()
    tree.load([{"id": 1}, {"id": 2, "pid": 1}, {"id": 3, "pid": 1}, {"id": 4, "pid": 3}])
    return tree


# =============================================================================
# Event Recording
# =============================================================================


class EventRecorder(EventListener):
    """Listener keeping every event it receives."""

    def __init__(self, events=None):
        self.events: List[Event] = []
        self._types = list(events) if events else list(EventType)

    def handle(self, event: Event) -> None:
        self.events.append(event)

    @property
    def subscribed_events(self):
        return self._types

    def of_type(self, event_type: EventType) -> List[Event]:
        return [e for e in self.events if e.type == event_type]


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def recorded_tree(region_tree, recorder) -> DataTree:
    """Region tree with an EventRecorder subscribed."""
    region_tree.subscribe(recorder)
    return region_tree


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def regions_file(tmp_path: Path, regions) -> Path:
    path = tmp_path / "regions.json"
    path.write_text(json.dumps(regions), encoding="utf-8")
    return path
