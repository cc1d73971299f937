"""Compile a generated module to bytecode: exercises the compiler itself."""

FUNCTIONS = 400


def _generate_source(count):
    parts = []
    for i in range(count):
        parts.append(
            f"def func_{i}(a, b, *args, key={i}, **kw):\n"
            f"    total = 0\n"
            f"    for x in range(a):\n"
            f"        if x % {i % 7 + 2} == 0:\n"
            f"            total += x * b\n"
            f"        elif x in kw:\n"
            f"            total -= kw[x]\n"
            f"        else:\n"
            f"            total ^= key\n"
            f"    return [y for y in args if y] + [total, {{'k': key}}]\n"
        )
    return "\n".join(parts)


def bytecomp_entry(measure):
    source = _generate_source(FUNCTIONS)
    return measure(lambda: compile(source, "<bytecomp>", "exec"))
