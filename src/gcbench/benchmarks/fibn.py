"""Iterative Fibonacci numbers, kept within machine-word range."""

N = 80
REPEAT = 50_000


def fibn(n):
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a


def fibn_entry():
    for _ in range(REPEAT):
        fibn(N)
