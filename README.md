# kernsync

Small building blocks for experimenting with the ideas of a teaching
operating-system kernel, expressed with ordinary Python threads.

## Modules

- `kernsync.itemlist.ItemList` — a list of items that can be used as a
  FIFO queue (`append`, `prepend`, `remove`) or kept in increasing key
  order (`sorted_insert`, `sorted_remove`, which returns the item and its
  key). Items with equal keys keep their insertion order. `remove` and
  `sorted_remove` raise `IndexError` on an empty list. `mapcar` applies a
  function to every item; the list also supports `len()` and iteration.
- `kernsync.synch` — `Semaphore`, `Lock` and `Condition`.
  - `Semaphore(name, initial_value)`: `acquire` waits for a positive value
    and decrements it; `release` increments it and wakes one waiter. A
    negative initial value raises `ValueError`.
  - `Lock(name)`: only the holding thread may `release` it, and
    re-acquiring a lock already held by the same thread raises
    `RuntimeError`. `is_held_by_current_thread` reports ownership; the
    lock can be used in a `with` block.
  - `Condition(name)`: Mesa-style `wait`, `signal` and `broadcast`. Each
    call must be made while holding the lock passed in (otherwise
    `RuntimeError`), and one condition must always be used with the same
    lock (otherwise `ValueError`).
- `kernsync.synchlist.SynchList` — a list shared between threads, where
  `remove` waits until an item is present; `append` wakes a waiter and
  `mapcar` runs under the list's lock.
- `kernsync.post` — a mailbox post office:
  - `PacketHeader(to, from_addr, length)` and `MailHeader(to, from_box,
    length)`; `MailHeader.pack` / `MailHeader.unpack` give a fixed-size
    wire form (`MAIL_HEADER_SIZE` bytes).
  - `MailBox` holds arrived `Mail` messages; `get` waits for one.
  - `PostOffice(addr, num_boxes, transmit, max_packet_size)` prefixes
    every outgoing message with its `MailHeader`, fills in the source
    address and packet length, and hands the packet to `transmit`.
    `send` then waits until `packet_sent` is called, so only one packet
    is outstanding at a time. Arriving packets are fed to
    `incoming_packet`, and a worker thread delivers them to the addressed
    box, where `receive(box)` waits for them and returns
    `(packet_header, mail_header, data)`. Payloads are limited to
    `max_mail_size()` (the packet size minus the mail header); larger
    messages, short data and unknown mailboxes raise `ValueError`.
    `close` stops the worker thread.
- `kernsync.console.SynchConsole(input_stream, output_stream)` — reading
  and writing one line at a time per direction (standard input and
  output by default). `write` returns the number of characters written.
  `read(num_bytes)` stops at a newline (consumed, not returned), after
  `num_bytes` characters or at the end of the input; a Ctrl-A character
  raises `EOFError`.
- `kernsync.nettest.mail_test(post_office, far_addr, out)` — the
  two-machine "hello / ack" exchange: sends a greeting to box 0 of
  `far_addr`, waits for the other side's greeting, acknowledges it,
  waits for the acknowledgement in box 1, prints each arrival to `out`
  (standard output by default) and returns both received messages.

## Example

```python
import threading

from kernsync.itemlist import ItemList
from kernsync.synch import Lock, Semaphore
from kernsync.synchlist import SynchList

ready = ItemList()
ready.append("a")
ready.append("b")
ready.prepend("first")
print(list(ready))      # ['first', 'a', 'b']
print(ready.remove())   # 'first'

done = Semaphore("done", 0)
guard = Lock("counter lock")
queue = SynchList()

def worker():
    item = queue.remove()   # waits until something is appended
    with guard:
        print("got", item)
    done.release()

threading.Thread(target=worker).start()
queue.append("job")
done.acquire()
```

Two post offices joined by an in-process "network":

```python
from kernsync.post import MailHeader, PacketHeader, PostOffice

offices = {}

def make_transmit(addr):
    def transmit(header, raw):
        offices[header.to].incoming_packet(header, raw)
        offices[addr].packet_sent()
    return transmit

offices[0] = PostOffice(0, 2, make_transmit(0), 64)
offices[1] = PostOffice(1, 2, make_transmit(1), 64)

offices[0].send(PacketHeader(to=1), MailHeader(to=0, from_box=1, length=5), b"hello")
packet_header, mail_header, data = offices[1].receive(0)
print(packet_header.from_addr, mail_header.from_box, data)   # 0 1 b'hello'

for office in offices.values():
    office.close()
```

## What this package does not do

There is no simulated machine, thread scheduler or network device here:
threads are ordinary Python threads, and the post office only moves
packets through the `transmit` callable you supply, so dropping or
delaying packets is up to that callable. There is no command-line
program; everything is used as a library.

## Running the tests

The tests use pytest and live in `tests/`:

```
pip install .[test]
pytest
```