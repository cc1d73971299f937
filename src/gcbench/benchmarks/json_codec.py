"""Encode and decode a nested document with the json module."""

import json

ROUNDS = 40


def _document():
    return {
        "items": [
            {"id": i, "name": f"item-{i}", "tags": ["a", "b", str(i)], "price": i * 0.25}
            for i in range(2_000)
        ],
        "meta": {"count": 2_000, "source": "gcbench"},
    }


def json_codec_entry(measure):
    doc = _document()

    def work():
        for _ in range(ROUNDS):
            json.loads(json.dumps(doc))

    return measure(work)
