"""Mailbox delivery of messages between machines over a packet network.

A post office owns a fixed number of numbered mailboxes. Outgoing
messages get a mail header prepended and are handed to a transmit
function; incoming packets are demultiplexed by a worker thread into the
mailbox named in their mail header, where they wait until a thread
receives them. Delivery is ordered but not reliable: the network below
may drop packets, though it never corrupts them.
"""

from __future__ import annotations

import logging
import struct
import threading
from collections import deque
from dataclasses import dataclass, replace
from typing import Callable

from kernsync.synch import Lock, Semaphore
from kernsync.synchlist import SynchList

logger = logging.getLogger(__name__)

_MAIL_HEADER_FORMAT = "<iiI"
MAIL_HEADER_SIZE = struct.calcsize(_MAIL_HEADER_FORMAT)


@dataclass(frozen=True)
class PacketHeader:
    """Network-level header: destination and source machines, packet length."""

    to: int
    from_addr: int = 0
    length: int = 0


@dataclass(frozen=True)
class MailHeader:
    """Post-office header: destination box, reply box, payload length."""

    to: int
    from_box: int
    length: int

    def pack(self) -> bytes:
        """Encode the header in its fixed-size wire form."""
        try:
            return struct.pack(_MAIL_HEADER_FORMAT, self.to, self.from_box, self.length)
        except struct.error as exc:
            raise ValueError(f"mail header out of range: {self}") from exc

    @classmethod
    def unpack(cls, raw: bytes) -> MailHeader:
        """Decode a header from the front of ``raw``."""
        if len(raw) < MAIL_HEADER_SIZE:
            raise ValueError(
                f"need {MAIL_HEADER_SIZE} bytes for a mail header, got {len(raw)}"
            )
        to, from_box, length = struct.unpack_from(_MAIL_HEADER_FORMAT, raw)
        return cls(to, from_box, length)


def _describe(packet_header: PacketHeader, mail_header: MailHeader) -> str:
    return (
        f"From ({packet_header.from_addr}, {mail_header.from_box}) "
        f"to ({packet_header.to}, {mail_header.to}) bytes {mail_header.length}"
    )


class Mail:
    """One message: both headers and the payload they describe."""

    def __init__(
        self,
        packet_header: PacketHeader,
        mail_header: MailHeader,
        data: bytes,
        max_mail_size: int | None = None,
    ) -> None:
        if max_mail_size is not None and mail_header.length > max_mail_size:
            raise ValueError(
                f"mail length {mail_header.length} exceeds maximum {max_mail_size}"
            )
        if len(data) < mail_header.length:
            raise ValueError(
                f"mail header claims {mail_header.length} bytes, got {len(data)}"
            )
        self.packet_header = packet_header
        self.mail_header = mail_header
        self.data = bytes(data[: mail_header.length])

    def __repr__(self) -> str:
        return f"Mail({self.packet_header!r}, {self.mail_header!r}, {self.data!r})"


class MailBox:
    """Temporary storage for messages arriving at one box number."""

    def __init__(self) -> None:
        self._messages = SynchList()

    def put(self, packet_header: PacketHeader, mail_header: MailHeader, data: bytes) -> None:
        """Queue a message, waking a thread waiting in ``get``, if any."""
        self._messages.append(Mail(packet_header, mail_header, data))

    def get(self) -> tuple[PacketHeader, MailHeader, bytes]:
        """Remove the oldest message, waiting until one arrives."""
        logger.debug("Waiting for mail in mailbox")
        mail = self._messages.remove()
        logger.debug("Got mail from mailbox: %s", _describe(mail.packet_header, mail.mail_header))
        return mail.packet_header, mail.mail_header, mail.data


class PostOffice:
    """A collection of mailboxes attached to one network address.

    ``transmit(packet_header, raw)`` puts a packet on the network; the
    network must call ``packet_sent`` once the next packet may be sent,
    and ``incoming_packet`` on the receiving office when a packet arrives.
    """

    def __init__(
        self,
        addr: int,
        num_boxes: int,
        transmit: Callable[[PacketHeader, bytes], object],
        max_packet_size: int,
    ) -> None:
        if num_boxes <= 0:
            raise ValueError("a post office needs at least one mailbox")
        if max_packet_size <= MAIL_HEADER_SIZE:
            raise ValueError(
                f"packet size must exceed the {MAIL_HEADER_SIZE}-byte mail header"
            )
        self.addr = addr
        self.num_boxes = num_boxes
        self._transmit = transmit
        self._max_packet_size = max_packet_size
        self._boxes = [MailBox() for _ in range(num_boxes)]
        self._message_available = Semaphore("message available", 0)
        self._message_sent = Semaphore("message sent", 0)
        self._send_lock = Lock("message send lock")
        self._arrivals: deque[tuple[PacketHeader, MailHeader, bytes] | None] = deque()
        self._closed = False
        self._worker = threading.Thread(
            target=self.postal_delivery, name="postal worker", daemon=True
        )
        self._worker.start()

    def max_mail_size(self) -> int:
        """Largest payload that fits in one packet after the mail header."""
        return self._max_packet_size - MAIL_HEADER_SIZE

    def _check_header(self, mail_header: MailHeader) -> None:
        if not 0 <= mail_header.to < self.num_boxes:
            raise ValueError(f"no mailbox {mail_header.to} (have {self.num_boxes})")
        if mail_header.length > self.max_mail_size():
            raise ValueError(
                f"mail length {mail_header.length} exceeds maximum {self.max_mail_size()}"
            )

    def send(self, packet_header: PacketHeader, mail_header: MailHeader, data: bytes) -> None:
        """Send a message to a mailbox on the machine named in ``packet_header``.

        The source address and packet length are filled in here. Only one
        packet is on the network at a time; this waits until the network
        reports the packet sent.
        """
        logger.debug("Post send: %s", _describe(packet_header, mail_header))
        self._check_header(mail_header)
        if len(data) < mail_header.length:
            raise ValueError(
                f"mail header claims {mail_header.length} bytes, got {len(data)}"
            )
        packet_header = replace(
            packet_header,
            from_addr=self.addr,
            length=mail_header.length + MAIL_HEADER_SIZE,
        )
        raw = mail_header.pack() + bytes(data[: mail_header.length])
        with self._send_lock:
            self._transmit(packet_header, raw)
            self._message_sent.acquire()

    def receive(self, box: int) -> tuple[PacketHeader, MailHeader, bytes]:
        """Take a message from ``box``, waiting until one is there."""
        if not 0 <= box < self.num_boxes:
            raise ValueError(f"no mailbox {box} (have {self.num_boxes})")
        return self._boxes[box].get()

    def postal_delivery(self) -> None:
        """Move arrived packets into their mailboxes until the office closes."""
        while True:
            self._message_available.acquire()
            arrival = self._arrivals.popleft()
            if arrival is None:
                return
            packet_header, mail_header, payload = arrival
            logger.debug("Putting mail into mailbox: %s", _describe(packet_header, mail_header))
            self._boxes[mail_header.to].put(packet_header, mail_header, payload)

    def incoming_packet(self, packet_header: PacketHeader, raw: bytes) -> None:
        """Accept a packet from the network for delivery by the worker."""
        mail_header = MailHeader.unpack(raw)
        self._check_header(mail_header)
        payload = bytes(raw[MAIL_HEADER_SIZE : MAIL_HEADER_SIZE + mail_header.length])
        if len(payload) < mail_header.length:
            raise ValueError(
                f"mail header claims {mail_header.length} bytes, got {len(payload)}"
            )
        self._arrivals.append((packet_header, mail_header, payload))
        self._message_available.release()

    def packet_sent(self) -> None:
        """Note that the network can take the next outgoing packet."""
        self._message_sent.release()

    def close(self) -> None:
        """Stop the delivery worker and wait for it to finish."""
        if self._closed:
            return
        self._closed = True
        self._arrivals.append(None)
        self._message_available.release()
        self._worker.join()

    def __repr__(self) -> str:
        return f"PostOffice(addr={self.addr}, boxes={self.num_boxes})"