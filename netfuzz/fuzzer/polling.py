from typing import Iterator

from netfuzz.transport.base import EventType, TransportEvent, TransportHost


def poll_events(host: TransportHost) -> Iterator[TransportEvent]:
    """
    Yield the events available to a host right now, without blocking.

    Queued events are drained first. Once the queue is empty the host is
    serviced once; an event it produces is the last one of this poll.
    """
    while True:
        event = host.check_events()
        if event.type is EventType.NONE:
            event = host.service(0)
            if event.type is not EventType.NONE:
                yield event
            return
        yield event
