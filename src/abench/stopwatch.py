import time


class StopWatch:
    """Times a single interval with ``time.perf_counter``.

    ``elapsed`` is in seconds and stays 0.0 until ``stop()`` is called.
    Calling ``start()`` again restarts the interval. ``stop()`` without a
    prior ``start()`` measures from a start of 0.0, i.e. it reports the raw
    ``perf_counter`` reading.
    """

    def __init__(self):
        self.start_time = 0.0
        self.end_time = 0.0
        self.elapsed = 0.0
        self.running = False

    def start(self) -> None:
        self.start_time = time.perf_counter()
        self.running = True

    def stop(self) -> float:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        self.running = False
        return self.elapsed
