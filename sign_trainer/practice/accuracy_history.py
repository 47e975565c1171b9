from collections import deque

HISTORY_SIZE = 20


class AccuracyHistory:
    """Rolling window of recent frame scores, averaged for the accuracy readout."""

    def __init__(self, capacity: int = HISTORY_SIZE):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            print(f"Warning: Invalid accuracy history size {capacity}. Using {HISTORY_SIZE}.")
            capacity = HISTORY_SIZE
        self.values = deque(maxlen=capacity)

    def push(self, value: float):
        self.values.append(value)

    def record(self, result):
        """Records a ComparisonResult. Matching frames count as 100."""
        self.push(100 if result.is_match else result.score)

    def smoothed_accuracy(self) -> float:
        if not self.values:
            return 0
        return sum(self.values) / len(self.values)

    def __len__(self):
        return len(self.values)
