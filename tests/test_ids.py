"""
tests/test_ids.py
~~~~~~~~~~~~~~~~~
Tests for haulbook.ids — base-36 encoding and entry id generation.
"""

from __future__ import annotations

import re
import threading

import pytest

from haulbook import ids
from haulbook.ids import generate_id, to_base36


class TestToBase36:
    @pytest.mark.parametrize("number, expected", [
        (0, "0"), (9, "9"), (10, "a"), (35, "z"), (36, "10"), (1295, "zz"),
    ])
    def test_known_values(self, number, expected):
        assert to_base36(number) == expected

    def test_matches_int_parsing(self):
        assert int(to_base36(1710489600000), 36) == 1710489600000

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            to_base36(-1)


class TestGenerateId:
    def test_alphabet(self):
        assert re.fullmatch(r"[0-9a-z]+", generate_id())

    def test_starts_with_timestamp(self, mocker):
        mocker.patch("haulbook.ids.time.time_ns", return_value=1_710_489_600_000 * 1_000_000)
        mocker.patch.object(ids, "_last_ms", 0)
        assert generate_id().startswith(to_base36(1_710_489_600_000))

    def test_suffix_fixed_width(self, mocker):
        mocker.patch("haulbook.ids.secrets.randbits", return_value=1)
        value = generate_id()
        assert value.endswith("0" * 12 + "1")

    def test_unique_within_same_millisecond(self, mocker):
        mocker.patch("haulbook.ids.time.time_ns", return_value=1_000_000_000_000)
        mocker.patch.object(ids, "_last_ms", 0)
        assert len({generate_id() for _ in range(1000)}) == 1000

    def test_clock_step_back_does_not_reorder(self, mocker):
        mocker.patch.object(ids, "_last_ms", 0)
        clock = mocker.patch("haulbook.ids.time.time_ns", return_value=2_000 * 1_000_000)
        first = ids._timestamp_ms()
        clock.return_value = 1_000 * 1_000_000
        assert ids._timestamp_ms() == first

    def test_thread_safe(self):
        results: list[str] = []
        lock = threading.Lock()

        def worker():
            made = [generate_id() for _ in range(200)]
            with lock:
                results.extend(made)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(set(results)) == len(results) == 1600
