"""
Event system for DataTree.

Allows decoupled observation of index mutations and ignored operations
via an event bus and listeners.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import click


class EventType(str, Enum):
    """Types of events in DataTree."""
    INDEX_LOADED = "index.loaded"
    INDEX_CLEARED = "index.cleared"
    NODES_APPENDED = "node.appended"
    NODE_REMOVED = "node.removed"
    NODE_MOVED = "node.moved"
    SELECTION_CHANGED = "selection.changed"
    OPERATION_IGNORED = "operation.ignored"


@dataclass
class Event:
    """Base event class."""
    type: EventType
    timestamp: datetime = field(default_factory=datetime.now)
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NodeEvent(Event):
    """Event for node-related actions."""
    node_id: Any = None
    target_id: Any = None
    node_ids: List[Any] = field(default_factory=list)


@dataclass
class DiagnosticEvent(Event):
    """Event for an operation that was ignored instead of raising."""
    operation: str = ""
    reason: str = ""
    node_ids: List[Any] = field(default_factory=list)

    def __str__(self) -> str:
        ids = f" ({', '.join(map(repr, self.node_ids))})" if self.node_ids else ""
        return f"{self.operation}: {self.reason}{ids}"


class EventListener(ABC):
    """Base class for event listeners."""

    @abstractmethod
    def handle(self, event: Event) -> None:
        """Handle an event.

        Args:
            event: The event to handle.
        """
        pass

    @property
    @abstractmethod
    def subscribed_events(self) -> List[EventType]:
        """Return list of event types this listener subscribes to."""
        pass


class CallbackListener(EventListener):
    """Listener forwarding events to a plain callable."""

    def __init__(
        self,
        callback: Callable[[Event], None],
        events: Optional[List[EventType]] = None,
    ) -> None:
        self._callback = callback
        self._events = list(events) if events else list(EventType)

    def handle(self, event: Event) -> None:
        self._callback(event)

    @property
    def subscribed_events(self) -> List[EventType]:
        return self._events


class DiagnosticEchoListener(EventListener):
    """Echo ignored operations to stderr."""

    def handle(self, event: Event) -> None:
        click.echo(f"  ⚠ {event}", err=True)

    @property
    def subscribed_events(self) -> List[EventType]:
        return [EventType.OPERATION_IGNORED]


class EventBus:
    """
    Event bus for publishing and subscribing to events.

    Each DataTree owns its own bus, so listeners never leak between trees.
    """

    def __init__(self) -> None:
        self._listeners: Dict[EventType, List[EventListener]] = {}

    def subscribe(self, listener: EventListener) -> None:
        """Subscribe a listener to events.

        Args:
            listener: The listener to subscribe.
        """
        for event_type in listener.subscribed_events:
            if event_type not in self._listeners:
                self._listeners[event_type] = []
            self._listeners[event_type].append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        """Unsubscribe a listener from all events.

        Args:
            listener: The listener to unsubscribe.
        """
        for event_type in self._listeners:
            if listener in self._listeners[event_type]:
                self._listeners[event_type].remove(listener)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribed listeners.

        Args:
            event: The event to publish.
        """
        listeners = self._listeners.get(event.type, [])
        for listener in list(listeners):
            try:
                listener.handle(event)
            except Exception as e:
                # Report but don't stop other listeners
                click.echo(f"  ⚠ Listener {listener.__class__.__name__} failed: {e}", err=True)

    def ignored(self, operation: str, reason: str, *node_ids: Any) -> None:
        """Publish an OPERATION_IGNORED diagnostic."""
        self.publish(
            DiagnosticEvent(
                type=EventType.OPERATION_IGNORED,
                operation=operation,
                reason=reason,
                node_ids=list(node_ids),
            )
        )
