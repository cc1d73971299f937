"""Increment every element of a long list in place."""

LENGTH = 50_000
PASSES = 60


def inclist_entry(measure):
    data = list(range(LENGTH))

    def work():
        for _ in range(PASSES):
            for i in range(len(data)):
                data[i] += 1

    return measure(work)
