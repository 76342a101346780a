"""Exchange of a greeting and an acknowledgement between two post offices."""

from __future__ import annotations

import sys
from typing import TextIO

from kernsync.post import MailHeader, PacketHeader, PostOffice

GREETING = b"Hello there!\x00"
ACKNOWLEDGEMENT = b"Got it!\x00"


def _as_text(data: bytes) -> str:
    return data.split(b"\x00", 1)[0].decode("latin-1")


def _report(
    message: tuple[PacketHeader, MailHeader, bytes], out: TextIO
) -> None:
    packet_header, mail_header, data = message
    out.write(
        f'Got "{_as_text(data)}" from {packet_header.from_addr}, '
        f"box {mail_header.from_box}\n"
    )
    out.flush()


def mail_test(
    post_office: PostOffice,
    far_addr: int,
    out: TextIO | None = None,
) -> list[tuple[PacketHeader, MailHeader, bytes]]:
    """Greet machine ``far_addr``, acknowledge its greeting and await its ack.

    Sends a greeting to box 0 of the far machine with box 1 as the reply
    box, waits for the far machine's greeting in box 0, acknowledges it to
    its reply box, then waits for the acknowledgement in box 1. Each
    arrival is reported on ``out``. Returns both received messages.
    """
    if out is None:
        out = sys.stdout
    received = []

    post_office.send(
        PacketHeader(to=far_addr),
        MailHeader(to=0, from_box=1, length=len(GREETING)),
        GREETING,
    )

    greeting = post_office.receive(0)
    _report(greeting, out)
    received.append(greeting)

    in_packet, in_mail, _ = greeting
    post_office.send(
        PacketHeader(to=in_packet.from_addr),
        MailHeader(to=in_mail.from_box, from_box=1, length=len(ACKNOWLEDGEMENT)),
        ACKNOWLEDGEMENT,
    )

    ack = post_office.receive(1)
    _report(ack, out)
    received.append(ack)
    return received