class RoundRobinSelector:
    """Cursor over pool indices. Advanced after every attempt, whatever its outcome"""

    def __init__(self, count: int) -> None:
        if count < 1:
            raise ValueError(f"need at least one pool, got {count=}")
        self.count = count
        self.current = 0

    def advance(self) -> int:
        self.current = (self.current + 1) % self.count
        return self.current
