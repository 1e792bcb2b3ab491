"""
Progress sinks for streamed build and pull output
"""

import json
import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


def decode_event(line: bytes) -> Dict[str, Any]:
    """
    Decode one line of Docker progress output

    Lines that are not JSON objects are wrapped as ``{'stream': text}``.
    """
    text = line.decode('utf-8', errors='ignore').strip()
    try:
        event = json.loads(text)
    except json.JSONDecodeError:
        return {'stream': text}
    if not isinstance(event, dict):
        return {'stream': text}
    return event


class ProgressSink:
    """Receives progress events; the base class discards them"""

    def send(self, event: Dict[str, Any]):
        pass

    def feed(self, line: bytes):
        """Decode a raw output line and send it on"""
        self.send(decode_event(line))


class NoProgress(ProgressSink):
    """Explicit 'no progress wanted' sink"""

    def feed(self, line: bytes):
        pass


NO_PROGRESS = NoProgress()


class CallbackProgress(ProgressSink):
    """Forwards every event to a callable"""

    def __init__(self, callback: Callable[[Dict[str, Any]], None]):
        self.callback = callback

    def send(self, event):
        self.callback(event)


class CollectingProgress(ProgressSink):
    """Keeps every event, useful to inspect a build afterwards"""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []

    def send(self, event):
        if 'error' in event:
            logger.debug(f"Progress error event: {event['error']}")
        self.events.append(event)

    @property
    def errors(self) -> List[str]:
        messages = []
        for event in self.events:
            if 'error' in event:
                detail = event.get('errorDetail') or {}
                messages.append(detail.get('message', event['error']))
        return messages

    @property
    def output(self) -> str:
        """Concatenated 'stream' text"""
        return ''.join(event.get('stream', '') for event in self.events)

    @property
    def image_id(self):
        """Image ID reported by the daemon in an 'aux' event, if any"""
        for event in reversed(self.events):
            aux = event.get('aux')
            if isinstance(aux, dict) and 'ID' in aux:
                return aux['ID']
        return None


def as_sink(progress) -> ProgressSink:
    """Accept a sink, a plain callable or None"""
    if progress is None:
        return NO_PROGRESS
    if isinstance(progress, ProgressSink):
        return progress
    if callable(progress):
        return CallbackProgress(progress)
    raise TypeError(f"Unsupported progress sink: {progress!r}")
