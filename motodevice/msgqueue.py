"""A thread-safe first-in, first-out message queue with blocking receive."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Callable, Optional

from motodevice.linkedlist import (
    InvalidParameterError,
    LinkedList,
    LinkedListError,
    ResourceUnavailableError,
)

log = logging.getLogger(__name__)

Dealloc = Optional[Callable[[Any], None]]


class MsgQueueStatus(enum.IntEnum):
    """Status codes carried by queue errors."""

    SUCCESS = 0
    FAILURE_GENERAL = -1
    INVALID_PARAMETER = -2
    INVALID_HANDLE = -3
    UNAVAILABLE_RESOURCE = -4
    INSUFFICIENT_BUFFER = -5


class MessageQueueError(Exception):
    """Raised when a queue operation fails; ``status`` tells why."""

    def __init__(self, status: MsgQueueStatus, message: str = "") -> None:
        super().__init__(message or status.name.lower().replace("_", " "))
        self.status = MsgQueueStatus(status)


class QueueUnblockedError(MessageQueueError):
    """Raised when the queue has been unblocked and can no longer be used."""

    def __init__(self, message: str = "message queue has been unblocked") -> None:
        super().__init__(MsgQueueStatus.UNAVAILABLE_RESOURCE, message)


def _status_of(error: LinkedListError) -> MsgQueueStatus:
    if isinstance(error, InvalidParameterError):
        return MsgQueueStatus.INVALID_PARAMETER
    if isinstance(error, ResourceUnavailableError):
        return MsgQueueStatus.UNAVAILABLE_RESOURCE
    return MsgQueueStatus.FAILURE_GENERAL


class MessageQueue:
    """Queue of messages shared between threads.

    Messages are received in the order they were sent. ``receive`` blocks
    until a message arrives or the queue is unblocked; once unblocked the
    queue refuses further sends and receives.
    """

    def __init__(self) -> None:
        self._messages = LinkedList()
        self._cond = threading.Condition(threading.Lock())
        self._unblocked = False

    def send(self, msg: Any, dealloc: Dealloc = None) -> None:
        """Put ``msg`` on the queue; ``dealloc`` is called on it if it is flushed."""
        if msg is None:
            raise MessageQueueError(
                MsgQueueStatus.INVALID_PARAMETER, "message must not be None"
            )
        with self._cond:
            log.debug("sending message %r", msg)
            if self._unblocked:
                log.error("message queue has been unblocked")
                raise QueueUnblockedError()
            try:
                self._messages.add(msg, dealloc)
            except LinkedListError as exc:
                raise MessageQueueError(_status_of(exc), str(exc)) from exc
            finally:
                self._cond.notify()

    def receive(self) -> Any:
        """Return the oldest message, waiting for one if the queue is empty."""
        log.debug("waiting on message")
        with self._cond:
            if self._unblocked:
                log.error("message queue has been unblocked")
                raise QueueUnblockedError()
            self._cond.wait_for(
                lambda: not self._messages.is_empty() or self._unblocked
            )
            try:
                msg = self._messages.remove()
            except ResourceUnavailableError as exc:
                raise QueueUnblockedError() from exc
            except LinkedListError as exc:
                raise MessageQueueError(_status_of(exc), str(exc)) from exc
        log.debug("received message %r", msg)
        return msg

    def flush(self) -> None:
        """Drop every queued message, calling each one's deallocation callback."""
        log.debug("flushing message queue")
        with self._cond:
            try:
                self._messages.flush()
            except LinkedListError as exc:
                raise MessageQueueError(_status_of(exc), str(exc)) from exc

    def unblock(self) -> None:
        """Stop the queue and wake every waiting receiver."""
        with self._cond:
            if self._unblocked:
                log.error("message queue has been unblocked")
                raise QueueUnblockedError()
            log.debug("unblocking message queue")
            self._unblocked = True
            self._cond.notify_all()

    def is_unblocked(self) -> bool:
        """Return True once the queue has been unblocked."""
        with self._cond:
            return self._unblocked

    def __len__(self) -> int:
        with self._cond:
            return len(self._messages)