import time


class Clock:
    """Wall clock used for timestamps and expiry math; tests swap in a controllable one."""

    def now_seconds(self) -> int:
        return int(time.time())

    def now_millis(self) -> int:
        return int(time.time() * 1000)
