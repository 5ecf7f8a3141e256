"""Tracks render-context loss so the frame loop can pause cleanly."""

import logging
from enum import Enum, auto

from poseforge.core.events import EventBus, EventType

logger = logging.getLogger(__name__)


class ContextState(Enum):
    ACTIVE = auto()
    LOST = auto()


class RenderContextMonitor:
    """ACTIVE -> LOST -> ACTIVE.  Repeated notifications are ignored."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self.state = ContextState.ACTIVE
        self.loss_count = 0

    def on_lost(self) -> None:
        if self.state is ContextState.LOST:
            return
        self.state = ContextState.LOST
        self.loss_count += 1
        logger.warning("Render context lost")
        self.event_bus.publish(EventType.CONTEXT_LOST)

    def on_restored(self) -> None:
        if self.state is ContextState.ACTIVE:
            return
        self.state = ContextState.ACTIVE
        logger.info("Render context restored")
        self.event_bus.publish(EventType.CONTEXT_RESTORED)

    @property
    def is_active(self) -> bool:
        return self.state is ContextState.ACTIVE
