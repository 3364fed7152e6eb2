import pytest

from npm_buttons.engine.models import ProcessEndEvent, ProcessStartEvent
from npm_buttons.runtime import EngineEventSink

from conftest import settle


class Controller:
    def __init__(self):
        self.seen = []

    async def reconcile_external_start(self, event):
        self.seen.append(event)
        if len(self.seen) == 1:
            raise RuntimeError("view refresh failed")

    def reconcile_external_end(self, event):
        self.seen.append(event)


@pytest.mark.asyncio
async def test_sink_survives_a_failing_dispatch(engine):
    controller = Controller()
    sink = EngineEventSink(engine, controller)
    sink.start()
    try:
        events = [ProcessStartEvent(execution=object()), ProcessStartEvent(execution=object()),
                  ProcessEndEvent(execution=object(), exit_code=0)]
        for event in events:
            engine.publish(event)
        await settle()
        assert controller.seen == events
        assert sink.running
    finally:
        sink.stop()
    assert not sink.running
