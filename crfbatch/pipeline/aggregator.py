import queue
import threading
from typing import Sequence, Tuple, Union
from crfbatch.domain.errors import InsufficientDataError
from crfbatch.domain.models import RunSummary, SizePair

Number = Union[int, float]


def median(values: Sequence[Number]) -> Number:
    """Middle value of the sorted sequence.

    Even-length input returns the true-division mean of the two middle
    values, so median([2, 4]) == 3.0. Raises InsufficientDataError when empty.
    """
    if not values:
        raise InsufficientDataError("Cannot compute median of an empty set")
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return ordered[middle]


class SizeAggregator:
    """Collects SizePairs from workers and summarizes them after the join.

    Workers only ever `submit()`; the intake is a thread-safe queue. `drain()`
    runs on the coordinating thread once every job has returned.
    """

    def __init__(self):
        self.intake: "queue.Queue[SizePair]" = queue.Queue()
        self._drain_lock = threading.Lock()
        self._input_sizes: Tuple[int, ...] = ()
        self._output_sizes: Tuple[int, ...] = ()

    def submit(self, pair: SizePair) -> None:
        self.intake.put(pair)

    def drain(self) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        """Moves everything queued into the frozen size tuples and returns them."""
        with self._drain_lock:
            inputs = list(self._input_sizes)
            outputs = list(self._output_sizes)
            while True:
                try:
                    pair = self.intake.get_nowait()
                except queue.Empty:
                    break
                inputs.append(pair.input_bytes)
                outputs.append(pair.output_bytes)
            self._input_sizes = tuple(inputs)
            self._output_sizes = tuple(outputs)
            return self._input_sizes, self._output_sizes

    @property
    def count(self) -> int:
        return len(self._input_sizes)

    def summarize(self, files_found: int) -> RunSummary:
        """Builds the RunSummary; raises InsufficientDataError if no job succeeded."""
        inputs, outputs = self.drain()
        if not inputs:
            raise InsufficientDataError(f"No successful jobs out of {files_found} file(s)")
        return RunSummary(
            files_found=files_found,
            succeeded=len(inputs),
            failed=files_found - len(inputs),
            median_input_bytes=median(inputs),
            median_output_bytes=median(outputs),
            total_input_bytes=sum(inputs),
            total_output_bytes=sum(outputs),
        )
