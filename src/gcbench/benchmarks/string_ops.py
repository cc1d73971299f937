"""String building, splitting and searching."""

WORDS = ["alpha", "beta", "gamma", "delta", "epsilon", "zeta", "eta", "theta"]
LINES = 40_000


def string_ops_entry():
    text = "\n".join(
        " ".join(WORDS[(i + j) % len(WORDS)] for j in range(12)) for i in range(LINES)
    )
    counts = {}
    for line in text.splitlines():
        for word in line.split():
            counts[word.upper()] = counts.get(word.upper(), 0) + 1
    text.replace("gamma", "GAMMA").find("omega")
    return counts
