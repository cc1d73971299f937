"""Naive doubly recursive Fibonacci: call overhead."""


def fib(n):
    if n < 2:
        return n
    return fib(n - 1) + fib(n - 2)


def fibn_rec_entry():
    fib(27)
