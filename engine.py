# engine.py

"""
Page replacement engine.

Holds the frame table model, the three replacement policies (Optimal,
Second-Chance and WSClock) and ReplacementEngine, the stateful wrapper used by
the visualizer and the command line runner.

Every policy is a generator: it consumes the trace in order, mutates the
FrameTable it was given and yields exactly one AccessResult per access.
"""

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Union

from access_trace import AccessRecord
from config import Algorithm, ConfigurationError, SimulationConfig


# =============================================================================
# DATA MODEL
# =============================================================================

@dataclass
class ResidentPage:
    """
    A page currently held in a frame.

    Attributes:
        page_number (int): Virtual page number
        referenced (bool): Reference bit, set on every access
        dirty (bool): Set by a write, cleared when a write-back is scheduled
        last_access_clock (int): Trace index of the most recent access
    """
    page_number: int
    referenced: bool = True
    dirty: bool = False
    last_access_clock: int = 0

    def __repr__(self):
        flags = ("R" if self.referenced else "-") + ("D" if self.dirty else "-")
        return f"[{self.page_number}|{flags}|{self.last_access_clock}]"


@dataclass(frozen=True)
class Hit:
    kind = "hit"


@dataclass(frozen=True)
class MissSimple:
    kind = "miss"


@dataclass(frozen=True)
class MissReplace:
    """A miss on a full table: replaced_page was evicted from frame_index."""
    replaced_page: int
    frame_index: int
    new_page: int

    kind = "replace"


AccessResult = Union[Hit, MissSimple, MissReplace]

HIT = Hit()
MISS_SIMPLE = MissSimple()

# Called with a copy of the page (still dirty), its frame index and the clock
WriteBackSink = Callable[[ResidentPage, int, int], None]


class FrameTable:
    """
    Fixed-capacity table of resident pages.

    Page numbers are unique and the table never grows past capacity. The
    clock hand is used by Second-Chance and WSClock; it is only moved by
    eviction scans and persists between misses.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ConfigurationError("Frame count must be at least 1")
        self.capacity = capacity
        self.pages: List[ResidentPage] = []
        self.hand = 0
        self._index: Dict[int, int] = {}

    def __len__(self):
        return len(self.pages)

    def __iter__(self):
        return iter(self.pages)

    def __getitem__(self, frame_index: int) -> ResidentPage:
        return self.pages[frame_index]

    def is_full(self) -> bool:
        return len(self.pages) >= self.capacity

    def find(self, page_number: int) -> Optional[int]:
        return self._index.get(page_number)

    def page_numbers(self) -> List[int]:
        return [page.page_number for page in self.pages]

    def insert(self, page: ResidentPage) -> int:
        if self.is_full():
            raise ValueError("Frame table is full")
        if page.page_number in self._index:
            raise ValueError(f"Page {page.page_number} is already resident")
        self.pages.append(page)
        frame_index = len(self.pages) - 1
        self._index[page.page_number] = frame_index
        return frame_index

    def replace(self, frame_index: int, page: ResidentPage) -> ResidentPage:
        """Put page into an occupied frame and return the evicted page."""
        if page.page_number in self._index:
            raise ValueError(f"Page {page.page_number} is already resident")
        evicted = self.pages[frame_index]
        del self._index[evicted.page_number]
        self.pages[frame_index] = page
        self._index[page.page_number] = frame_index
        return evicted

    def advance_hand(self) -> int:
        self.hand = (self.hand + 1) % len(self.pages)
        return self.hand


# -----------------------------
# Helpers
# -----------------------------

def _new_page(record: AccessRecord, clock: int) -> ResidentPage:
    return ResidentPage(
        page_number=record.page_number,
        referenced=True,
        dirty=record.is_write,
        last_access_clock=clock,
    )


def _touch(page: ResidentPage, record: AccessRecord, clock: int):
    page.referenced = True
    page.last_access_clock = clock
    if record.is_write:
        page.dirty = True


# =============================================================================
# OPTIMAL
# =============================================================================

NEVER = float("inf")


def next_use_indices(trace: Sequence[AccessRecord]):
    """
    Precompute, for every trace position, the index of the next access to the
    same page (NEVER if there is none).

    Returns:
        Tuple[List[float], Dict[int, int]]: next use per position, and the
            first use of every page in the trace
    """
    next_use: List[float] = [NEVER] * len(trace)
    seen: Dict[int, int] = {}
    for i in range(len(trace) - 1, -1, -1):
        page = trace[i].page_number
        next_use[i] = seen.get(page, NEVER)
        seen[page] = i
    return next_use, seen


def iter_optimal(frames: FrameTable, trace: Sequence[AccessRecord]) -> Iterator[AccessResult]:
    """
    Belady's optimal replacement.

    On a full-table miss the page whose next use lies farthest ahead is
    evicted. A page that is never used again beats any page that is; among
    several such pages the lowest frame index wins.
    """
    next_use, first_use = next_use_indices(trace)

    # resident page -> trace index of its next access
    upcoming: Dict[int, float] = {
        page.page_number: first_use.get(page.page_number, NEVER) for page in frames
    }

    for clock, record in enumerate(trace):
        page_no = record.page_number
        frame_index = frames.find(page_no)

        if frame_index is not None:
            _touch(frames[frame_index], record, clock)
            upcoming[page_no] = next_use[clock]
            yield HIT
            continue

        if not frames.is_full():
            frames.insert(_new_page(record, clock))
            upcoming[page_no] = next_use[clock]
            yield MISS_SIMPLE
            continue

        # max() keeps the first of equal keys, so NEVER ties go to the lowest index
        victim = max(range(len(frames)), key=lambda i: upcoming[frames[i].page_number])
        evicted = frames.replace(victim, _new_page(record, clock))
        del upcoming[evicted.page_number]
        upcoming[page_no] = next_use[clock]
        yield MissReplace(evicted.page_number, victim, page_no)


# =============================================================================
# SECOND-CHANCE (CLOCK)
# =============================================================================

def iter_second_chance(frames: FrameTable, trace: Sequence[AccessRecord]) -> Iterator[AccessResult]:
    """
    Second-Chance replacement.

    Frames are visited in FIFO order by the clock hand. A referenced page has
    its bit cleared and is passed over; the first unreferenced page is
    evicted and the new page takes its frame, becoming the newest entry.
    """
    for clock, record in enumerate(trace):
        page_no = record.page_number
        frame_index = frames.find(page_no)

        if frame_index is not None:
            _touch(frames[frame_index], record, clock)
            yield HIT
            continue

        if not frames.is_full():
            frames.insert(_new_page(record, clock))
            yield MISS_SIMPLE
            continue

        while frames[frames.hand].referenced:
            frames[frames.hand].referenced = False
            frames.advance_hand()

        victim = frames.hand
        evicted = frames.replace(victim, _new_page(record, clock))
        frames.advance_hand()
        yield MissReplace(evicted.page_number, victim, page_no)


# =============================================================================
# WSCLOCK
# =============================================================================

class CandidateRank(IntEnum):
    """Eviction preference of a frame visited by the WSClock scan, lowest first."""
    NONE = 0
    DIRTY_WITHIN_TAU = 1
    CLEAN_WITHIN_TAU = 2
    OLD_AND_DIRTY = 3
    OLD_AND_CLEAN = 4


def candidate_rank(page: ResidentPage, clock: int, tau: int) -> CandidateRank:
    if page.referenced:
        return CandidateRank.NONE
    if clock - page.last_access_clock > tau:
        return CandidateRank.OLD_AND_DIRTY if page.dirty else CandidateRank.OLD_AND_CLEAN
    return CandidateRank.DIRTY_WITHIN_TAU if page.dirty else CandidateRank.CLEAN_WITHIN_TAU


def _wsclock_victim(
    frames: FrameTable,
    clock: int,
    tau: int,
    on_write_back: Optional[WriteBackSink],
) -> int:
    best_rank = CandidateRank.NONE
    best_index = frames.hand

    # Two rotations: the first clears every reference bit, so the second
    # always ranks each frame above NONE.
    for _ in range(2 * len(frames)):
        frame_index = frames.hand
        page = frames[frame_index]
        rank = candidate_rank(page, clock, tau)

        if rank is CandidateRank.OLD_AND_CLEAN:
            return frame_index

        if page.referenced:
            page.referenced = False
        elif rank is CandidateRank.OLD_AND_DIRTY:
            if on_write_back is not None:
                on_write_back(replace(page), frame_index, clock)
            page.dirty = False

        if rank > best_rank:
            best_rank, best_index = rank, frame_index
        frames.advance_hand()

    return best_index


def iter_wsclock(
    frames: FrameTable,
    trace: Sequence[AccessRecord],
    tau: int,
    on_write_back: Optional[WriteBackSink] = None,
) -> Iterator[AccessResult]:
    """
    WSClock replacement.

    The scan starts wherever the previous one stopped. An unreferenced page
    older than tau is evicted at once if clean; if dirty a write-back is
    scheduled through on_write_back and the scan moves on. When no old clean
    page turns up within two rotations the best ranked fallback is evicted
    (see CandidateRank).

    Args:
        frames (FrameTable): Table to mutate, normally empty
        trace (Sequence[AccessRecord]): Accesses in order
        tau (int): Age threshold, in accesses
        on_write_back (Optional[WriteBackSink]): Receives write-back notices
    """
    for clock, record in enumerate(trace):
        page_no = record.page_number
        frame_index = frames.find(page_no)

        if frame_index is not None:
            _touch(frames[frame_index], record, clock)
            yield HIT
            continue

        if not frames.is_full():
            frames.insert(_new_page(record, clock))
            yield MISS_SIMPLE
            continue

        victim = _wsclock_victim(frames, clock, tau, on_write_back)
        evicted = frames.replace(victim, _new_page(record, clock))
        yield MissReplace(evicted.page_number, victim, page_no)


# =============================================================================
# SIMULATION ENTRY POINTS
# =============================================================================

def iter_policy(
    algorithm: str,
    frames: FrameTable,
    trace: Sequence[AccessRecord],
    tau: int = 0,
    on_write_back: Optional[WriteBackSink] = None,
) -> Iterator[AccessResult]:
    if algorithm == Algorithm.OPTIMAL:
        return iter_optimal(frames, trace)
    elif algorithm == Algorithm.SECOND_CHANCE:
        return iter_second_chance(frames, trace)
    elif algorithm == Algorithm.WSCLOCK:
        return iter_wsclock(frames, trace, tau, on_write_back)
    raise ConfigurationError(f"Unknown algorithm: {algorithm}")


def simulate(
    algorithm: str,
    capacity: int,
    trace: Sequence[AccessRecord],
    tau: int = 0,
    on_write_back: Optional[WriteBackSink] = None,
) -> List[AccessResult]:
    """
    Run one policy over a whole trace on an empty frame table.

    Raises:
        ConfigurationError: For an unknown algorithm, capacity < 1 or tau < 0
    """
    SimulationConfig(algorithm, capacity, tau).validate()
    frames = FrameTable(capacity)
    return list(iter_policy(algorithm, frames, trace, tau, on_write_back))


def simulate_optimal(capacity: int, trace: Sequence[AccessRecord]) -> List[AccessResult]:
    return simulate(Algorithm.OPTIMAL, capacity, trace)


def simulate_second_chance(capacity: int, trace: Sequence[AccessRecord]) -> List[AccessResult]:
    return simulate(Algorithm.SECOND_CHANCE, capacity, trace)


def simulate_wsclock(
    capacity: int,
    trace: Sequence[AccessRecord],
    tau: int,
    on_write_back: Optional[WriteBackSink] = None,
) -> List[AccessResult]:
    return simulate(Algorithm.WSCLOCK, capacity, trace, tau, on_write_back)


def count_faults(results: Iterable[AccessResult]) -> int:
    return sum(1 for result in results if not isinstance(result, Hit))


# =============================================================================
# REPLACEMENT ENGINE - stateful wrapper for the UI and CLI
# =============================================================================

class ReplacementEngine:
    """
    Steps one replacement policy through a trace and keeps the bookkeeping
    the front ends display.

    Attributes:
        config (SimulationConfig): Algorithm, frame count and tau
        trace (List[AccessRecord]): Loaded trace
        frames (FrameTable): Current frame table
        results (List[AccessResult]): One result per processed access
        event_log (List[str]): Human readable log of every event
        write_back_notices (List[str]): Write-backs scheduled by WSClock
    """

    def __init__(self, capacity: int, algorithm: str = Algorithm.OPTIMAL, tau: int = 0):
        self.config = SimulationConfig(algorithm, capacity, tau).validate()
        self.trace: List[AccessRecord] = []
        self.reset()

    @property
    def algorithm(self) -> str:
        return self.config.algorithm

    @property
    def position(self) -> int:
        """Number of accesses processed so far."""
        return len(self.results)

    @property
    def finished(self) -> bool:
        return self.position >= len(self.trace)

    # -----------------------------
    # Configuration
    # -----------------------------

    def set_algorithm(self, algorithm: str):
        self.config = SimulationConfig(algorithm, self.config.capacity, self.config.tau).validate()
        self.reset()

    def load(self, trace: Iterable[AccessRecord]):
        self.trace = list(trace)
        self.reset()

    def reset(self):
        """Start the loaded trace again from an empty frame table."""
        self.frames = FrameTable(self.config.capacity)
        self.results: List[AccessResult] = []
        self.event_log: List[str] = []
        self.write_back_notices: List[str] = []
        self._pending: List[str] = []
        self._runner = iter_policy(
            self.config.algorithm,
            self.frames,
            self.trace,
            self.config.tau,
            self._schedule_write_back,
        )

    # -----------------------------
    # Running
    # -----------------------------

    def step(self) -> Optional[AccessResult]:
        """Process the next access; None once the trace is exhausted."""
        result = next(self._runner, None)
        if result is None:
            return None
        record = self.trace[self.position]
        self.results.append(result)
        self._log_result(record, result)
        return result

    def run(self) -> List[AccessResult]:
        """Process every remaining access and return all results so far."""
        while self.step() is not None:
            pass
        return self.results

    # -----------------------------
    # Event log
    # -----------------------------

    def _schedule_write_back(self, page: ResidentPage, frame_index: int, clock: int):
        notice = f"Write-back scheduled: Page {page.page_number} from Frame {frame_index} (t={clock})"
        self.write_back_notices.append(notice)
        self._pending.append(notice)

    def _log_result(self, record: AccessRecord, result: AccessResult):
        page_no = record.page_number
        if isinstance(result, Hit):
            self.event_log.append(f"Hit: Page {page_no} in Frame {self.frames.find(page_no)}")
            return

        self.event_log.append(f"Fault: Page {page_no} not in memory")
        self.event_log.extend(self._pending)
        self._pending.clear()

        if isinstance(result, MissReplace):
            self.event_log.append(f"Evicting: Page {result.replaced_page} from Frame {result.frame_index}")
            self.event_log.append(f"Loaded: Page {page_no} -> Frame {result.frame_index} (replaced)")
        else:
            self.event_log.append(f"Loaded: Page {page_no} -> Frame {self.frames.find(page_no)}")

    # -----------------------------
    # Inspection
    # -----------------------------

    def get_state(self) -> FrameTable:
        return self.frames

    def get_results(self) -> List[AccessResult]:
        return list(self.results)

    def get_stats(self) -> Dict[str, float]:
        """
        Hit/fault statistics for the accesses processed so far.

        Returns:
            Dict[str, float]: hits, faults, hit_ratio, fault_rate, total_refs
                and write_backs
        """
        faults = count_faults(self.results)
        total_refs = len(self.results)
        hits = total_refs - faults
        hit_ratio = (hits / total_refs) if total_refs > 0 else 0.0
        fault_rate = (faults / total_refs) if total_refs > 0 else 0.0

        return {
            "hits": hits,
            "faults": faults,
            "hit_ratio": round(hit_ratio, 4),
            "fault_rate": round(fault_rate, 4),
            "total_refs": total_refs,
            "write_backs": len(self.write_back_notices),
        }

    @staticmethod
    def compare(capacity: int, trace: Sequence[AccessRecord], tau: int = 0) -> Dict[str, int]:
        """Fault count of every algorithm on the same trace."""
        return {
            algorithm: count_faults(simulate(algorithm, capacity, trace, tau))
            for algorithm in Algorithm.ALL
        }
