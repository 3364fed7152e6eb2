from npm_buttons.runtime.event_bus import EngineEventBus
from npm_buttons.runtime.sinks import EngineEventSink

__all__ = [
    "EngineEventBus",
    "EngineEventSink",
]
