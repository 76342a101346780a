import io
import threading

import pytest

from kernsync.nettest import mail_test
from kernsync.post import PostOffice


def _network(addresses, num_boxes=10):
    offices = {}

    def make_transmit(addr):
        def transmit(packet_header, raw):
            offices[packet_header.to].incoming_packet(packet_header, raw)
            offices[addr].packet_sent()

        return transmit

    for addr in addresses:
        offices[addr] = PostOffice(addr, num_boxes, make_transmit(addr), 64)
    return offices


@pytest.fixture
def loopback():
    offices = _network([0])
    yield offices[0]
    offices[0].close()


@pytest.fixture
def pair():
    offices = _network([0, 1])
    yield offices
    for office in offices.values():
        office.close()


def test_loopback_reports_both_messages(loopback):
    out = io.StringIO()
    mail_test(loopback, 0, out)
    assert out.getvalue() == (
        'Got "Hello there!" from 0, box 1\n' 'Got "Got it!" from 0, box 1\n'
    )


def test_loopback_returns_received_payloads(loopback):
    received = mail_test(loopback, 0, io.StringIO())
    assert [data for _, _, data in received] == [b"Hello there!\x00", b"Got it!\x00"]
    greeting_header = received[0][1]
    assert greeting_header.to == 0
    assert greeting_header.length == len(b"Hello there!\x00")
    ack_header = received[1][1]
    assert ack_header.to == 1


def test_two_machines_exchange_messages(pair):
    out_far = io.StringIO()
    far_results = []
    far_machine = threading.Thread(
        target=lambda: far_results.append(mail_test(pair[1], 0, out_far))
    )
    far_machine.start()

    out_near = io.StringIO()
    received = mail_test(pair[0], 1, out_near)
    far_machine.join(timeout=10)

    assert not far_machine.is_alive()
    assert [data for _, _, data in received] == [b"Hello there!\x00", b"Got it!\x00"]
    assert all(packet.from_addr == 1 for packet, _, _ in received)
    assert all(packet.to == 0 for packet, _, _ in received)
    assert out_near.getvalue() == (
        'Got "Hello there!" from 1, box 1\n' 'Got "Got it!" from 1, box 1\n'
    )
    assert out_far.getvalue() == (
        'Got "Hello there!" from 0, box 1\n' 'Got "Got it!" from 0, box 1\n'
    )
    assert len(far_results) == 1
    assert all(packet.from_addr == 0 for packet, _, _ in far_results[0])
    assert all(packet.to == 1 for packet, _, _ in far_results[0])


def test_ack_to_missing_box_raises():
    offices = _network([0], num_boxes=1)
    try:
        with pytest.raises(ValueError):
            mail_test(offices[0], 0, io.StringIO())
    finally:
        offices[0].close()