"""EventBus for decoupled publish/subscribe communication."""

from enum import Enum, auto
from typing import Any, Callable
from collections import defaultdict


class EventType(Enum):
    # Loading events
    LOADING_STARTED = auto()
    LOADING_COMPLETE = auto()     # data: bone_count (int)
    LOAD_FAILED = auto()          # data: error (str)
    BONES_DISCOVERED = auto()     # data: bone_names (list[str])

    # Camera framing
    SCENE_BOUNDS_READY = auto()   # data: bounds (SceneBounds)

    # Inputs
    EMOTION_SET = auto()          # data: emotion (Emotion)
    LANDMARKS_RECEIVED = auto()   # data: detected (bool)

    # Manual offsets (control surface)
    TRANSFORM_CHANGED = auto()    # data: bone (str), transform (BoneTransform)
    BONE_RESET = auto()           # data: bone (str)
    ALL_BONES_RESET = auto()
    BONE_SELECTED = auto()        # data: bone (str | None)

    # Rendering context
    CONTEXT_LOST = auto()
    CONTEXT_RESTORED = auto()

    # Frame events
    FRAME_UPDATE = auto()         # data: frame (int), bones_written (int)


class EventBus:
    """Simple publish/subscribe event system."""

    def __init__(self):
        self._handlers: dict[EventType, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Callable) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Callable) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_type: EventType, **data: Any) -> None:
        for handler in list(self._handlers[event_type]):
            handler(**data)

    def clear(self) -> None:
        self._handlers.clear()
