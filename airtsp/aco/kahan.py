class KahanAdder:
    """Compensated (Kahan) summation: a running sum plus the low-order bits it lost."""

    __slots__ = ("sum", "correction")

    def __init__(self, x=0.0):
        self.sum = float(x)
        self.correction = 0.0

    def __repr__(self):
        return f"KahanAdder(sum={self.sum!r}, correction={self.correction!r})"

    @property
    def result(self):
        return self.sum

    def push(self, x):
        y = x - self.correction
        total = self.sum + y
        self.correction = (total - self.sum) - y
        self.sum = total
        return self

    def push_and_result(self, x):
        """Sum after folding in x, leaving the adder untouched."""
        return self.sum + (x - self.correction)


def kahan_sum(values):
    adder = KahanAdder()
    for x in values:
        adder.push(x)
    return adder.result
