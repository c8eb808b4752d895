"""
Stress tests for thread-safety of timezone resolution and the pattern cache.

Note this isn't a unit test, because it relies on a clean pattern cache
"""

import sys
import time
from threading import Thread

from dtt import DateTime, available_timezones

if not hasattr(sys, "_is_gil_enabled") or sys._is_gil_enabled():
    # Running with GIL enabled can still be useful to compare performance,
    # but be sure to warn that threading hasn't been stress tested.
    print("WARNING: Running with GIL enabled. Threading not stress tested.")


DT = DateTime(2024, 6, 15, 12, 0)
NUM_THREADS = 16
NUM_ITERATIONS = 500
TIMEZONE_SAMPLE = sorted(available_timezones()) + ["GMT"]
PATTERN_SAMPLE = [
    "[year]-[month]-[day]",
    "[day]/[month]/[year] [hour]:[minute]",
    "[weekday] [day] [month_name] [year]",
    "[year]-[ordinal]",
    "[year]-[month]-[day] W[iso_week] [offset]",
]
assert (
    len(TIMEZONE_SAMPLE) % NUM_THREADS
), "Timezone sample should not be evenly divisible by number of threads"
TZS = TIMEZONE_SAMPLE * (NUM_THREADS * NUM_ITERATIONS)
PATTERNS = PATTERN_SAMPLE * (NUM_THREADS * NUM_ITERATIONS)


def convert_timezones(tzs):
    """Resolve abbreviations and convert to them"""
    for tz in tzs:
        converted = DT.to_tz(tz)
        assert converted == DT
        del converted


def round_trip_patterns(patterns):
    """Compile patterns concurrently, through formatting and parsing"""
    for pattern in patterns:
        parsed = DateTime.parse_custom_format(DT.format(pattern), pattern)
        assert parsed.date() == DT.date()


def main(func, items):
    print(f"Starting test: {func.__name__}")
    threads = []

    start_time = time.time()

    for n in range(NUM_THREADS):
        thread = Thread(target=func, args=(items[n::NUM_THREADS],))
        threads.append(thread)
        thread.start()

    for thread in threads:
        thread.join()

    end_time = time.time()
    print(f"Execution time: {end_time - start_time:.2f} seconds")


if __name__ == "__main__":
    main(convert_timezones, TZS)
    main(round_trip_patterns, PATTERNS)
