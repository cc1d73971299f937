"""Allocate reference cycles so the cyclic collector has work to do."""

NODES = 200_000


class Node:
    __slots__ = ("next", "prev", "payload")

    def __init__(self, payload):
        self.payload = payload
        self.next = None
        self.prev = None


def gc_cycles_entry():
    for i in range(NODES // 2):
        a = Node(i)
        b = Node([i])
        a.next, b.prev = b, a
        b.next, a.prev = a, b
