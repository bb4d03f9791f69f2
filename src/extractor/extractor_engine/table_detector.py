"""Table structure detection: run every layout strategy and pick a winner."""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

from .grid import CellResolver, SheetGrid
from .log_config import get_logger
from .models import ParseResult
from .strategies import STRATEGIES, StrategyFn

log = get_logger(__name__)


def collect_sections(results: Iterable[ParseResult]) -> List[str]:
    """Sorted section codes seen by any candidate, winner or not."""
    return sorted({entry.section for result in results for entry in result.entries})


def select_best(results: Iterable[ParseResult]) -> ParseResult:
    """
    Pick the winning candidate.

    Largest entry count wins; equal counts go to the higher average
    confidence; a full tie keeps the earlier candidate.

    Args:
        results: Candidates in (sheet, strategy) order

    Returns:
        The winning ParseResult, or an empty "none" result if every
        candidate is empty
    """
    best: Optional[ParseResult] = None
    for result in results:
        if not result.entries:
            continue
        if best is None or (len(result), result.avg_confidence) > (len(best), best.avg_confidence):
            best = result
    return best if best is not None else ParseResult(strategy="none")


class TableDetector:
    """Runs all layout strategies over all sheets of a workbook."""

    def __init__(self, strategies: Sequence[Tuple[str, StrategyFn]] = STRATEGIES, max_workers: int = 1):
        """
        Initialize table detector.

        Args:
            strategies: (name, function) pairs, in tie-break order
            max_workers: Thread pool size; 1 runs everything inline
        """
        self.strategies = list(strategies)
        self.max_workers = max(1, int(max_workers))

    def run_all(self, sheets: Sequence[SheetGrid]) -> List[ParseResult]:
        """One ParseResult per (sheet x strategy), in deterministic order."""
        jobs = []
        for sheet in sheets:
            # one resolver per sheet, shared by every strategy on it
            resolver = CellResolver(sheet)
            for _name, strategy in self.strategies:
                jobs.append((strategy, sheet, resolver.resolve))

        if self.max_workers == 1 or len(jobs) <= 1:
            results = [strategy(sheet, resolve) for strategy, sheet, resolve in jobs]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="strategy") as pool:
                futures = [pool.submit(strategy, sheet, resolve) for strategy, sheet, resolve in jobs]
                results = [future.result() for future in futures]

        for result in results:
            log.debug(
                "strategy_result",
                sheet=result.sheet_name,
                strategy=result.strategy,
                entries=len(result),
                avg_confidence=round(result.avg_confidence, 3),
            )
        return results

    def detect(self, sheets: Sequence[SheetGrid]) -> ParseResult:
        """
        Detect the table structure of a workbook.

        Args:
            sheets: Every sheet of the workbook

        Returns:
            The winning ParseResult
        """
        return self.choose(self.run_all(sheets))

    def choose(self, results: Sequence[ParseResult]) -> ParseResult:
        """Arbitrate over the candidates of run_all and log the winner."""
        best = select_best(results)
        log.info(
            "strategy_selected",
            strategy=best.strategy,
            sheet=best.sheet_name,
            entries=len(best),
            avg_confidence=round(best.avg_confidence, 3),
        )
        return best
