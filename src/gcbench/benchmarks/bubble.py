"""Bubble sort on a reversed list."""

SIZE = 400
REPEAT = 12


def bubble(lst):
    n = len(lst)
    for i in range(n):
        for j in range(n - 1 - i):
            if lst[j] > lst[j + 1]:
                lst[j], lst[j + 1] = lst[j + 1], lst[j]
    return lst


def bubble_entry(measure):
    # Inputs are built outside the measured region.
    inputs = [list(range(SIZE, 0, -1)) for _ in range(REPEAT)]

    def work():
        for lst in inputs:
            bubble(lst)

    return measure(work)
