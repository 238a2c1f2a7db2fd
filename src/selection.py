"""Top-N neighbourhood selection by total reported crime."""

import logging

import pandas as pd

from config import TOP_N
from exceptions import DataIntegrityError

log = logging.getLogger(__name__)


def rank_neighbourhoods(totals: pd.Series) -> pd.DataFrame:
    """
    Rank every neighbourhood by total, descending.
    Equal totals keep the order of the cleaned table (earlier row ranks higher).
    """
    ranked = pd.DataFrame({
        "neighbourhood": totals.index,
        "total": totals.to_numpy(),
        "_position": range(len(totals)),
    })
    ranked = ranked.sort_values(["total", "_position"], ascending=[False, True], kind="stable")
    ranked["rank"] = range(1, len(ranked) + 1)
    return ranked[["rank", "neighbourhood", "total"]].reset_index(drop=True)


def select_top_neighbourhoods(totals: pd.Series, n: int = TOP_N) -> list[str]:
    if n < 1:
        raise DataIntegrityError(f"Top-N size must be at least 1, got {n}")
    if totals.index.has_duplicates:
        raise DataIntegrityError("Neighbourhood totals contain duplicate names")
    if len(totals) < n:
        raise DataIntegrityError(
            f"Only {len(totals)} neighbourhoods survived cleaning; {n} are needed for the top-{n} set"
        )

    top = rank_neighbourhoods(totals).head(n)["neighbourhood"].tolist()
    log.info(f"Top {n} neighbourhoods: {top}")
    return top
