# fair_assignment/matching/gateway.py
from __future__ import annotations

import random
from copy import deepcopy
from typing import List, Optional, Protocol

from ..models import AssignmentResult, Category, Student, WorkingState
from ..config import MULTI_MODE, SINGLE_MODE
from ..logger import logger
from .da_stb import DeferredAcceptanceEngine


class MatchingEngine(Protocol):
    """
    Black-box assignment engine.

    Given students (ordered preferences + excludes), categories (capacities),
    a mode flag and a random source for tie-breaking, return a result that
    respects capacities and excludes and honours preference order. The engine
    may mutate its inputs.
    """

    def match(
        self,
        students: List[Student],
        categories: List[Category],
        multi: bool,
        rng: random.Random,
    ) -> AssignmentResult:
        ...


def request_match(
    state: WorkingState,
    engine: Optional[MatchingEngine] = None,
    rng: Optional[random.Random] = None,
) -> AssignmentResult:
    """
    Run the engine on copies of the current students/categories and store
    the result on the state. A fresh OS-backed random source is used per call
    unless one is injected.
    """
    if engine is None:
        engine = DeferredAcceptanceEngine()
    if rng is None:
        rng = random.SystemRandom()

    mode = MULTI_MODE if state.multi_match_mode else SINGLE_MODE
    logger.info(
        "Making %s matches for %d students over %d categories...",
        mode, len(state.students), len(state.categories),
    )

    result = engine.match(
        deepcopy(state.students),
        deepcopy(state.categories),
        state.multi_match_mode,
        rng,
    )
    state.result = result
    logger.info(
        "Matches made: %d placement(s), %d not placable",
        sum(len(v) for v in result.placed.values()),
        len(result.not_placable),
    )
    return result


def clear_match(state: WorkingState) -> None:
    if state.result is not None:
        logger.info("Discarding match result")
    state.result = None
