import heapq
import itertools
import random

import pytest

from hierarchy import Area, Hierarchy, Member, Project


class ManualTimer:
    """
    Stand-in for a tk widget's after/after_cancel. Time only moves when a
    test calls advance(); due callbacks then fire in time order.
    """

    def __init__(self):
        self.time = 0.0
        self._queue = []
        self._cancelled = set()
        self._ids = itertools.count(1)

    def after(self, ms, callback):
        token = next(self._ids)
        heapq.heappush(self._queue, (self.time + max(0, ms), token, callback))
        return token

    def after_cancel(self, token):
        self._cancelled.add(token)

    def now(self):
        return self.time

    def pending(self):
        return sum(1 for _, token, _ in self._queue if token not in self._cancelled)

    def advance(self, ms, on_fire=None):
        end = self.time + ms
        while self._queue and self._queue[0][0] <= end:
            due, token, callback = heapq.heappop(self._queue)
            if token in self._cancelled:
                self._cancelled.discard(token)
                continue
            self.time = due
            callback()
            if on_fire is not None:
                on_fire()
        self.time = end


@pytest.fixture
def timer():
    return ManualTimer()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sample_hierarchy():
    areas = [Area(1, "Wada", "#ff6b6b"), Area(2, "Ato", "#4ecdc4"), Area(3, "Hofu", "#ffd166")]
    projects = [
        Project(1, "Flyer PJ", "#ff6b6b", 1),
        Project(2, "Event PJ", "#ff7f7f", 1),
        Project(3, "Farm PJ", "#4ecdc4", 2),
        Project(4, "Cafe PJ", "#ffd166", 3),
    ]
    members = [
        Member(1, "Aki", 1), Member(2, "Ben", 1), Member(3, "Chie", 1),
        Member(4, "Dai", 2), Member(5, "Emi", 2),
        Member(6, "Fumi", 3), Member(7, "Gen", 3), Member(8, "Hana", 3),
        Member(9, "Iku", 4),
    ]
    return Hierarchy(areas, projects, members)


@pytest.fixture
def abc_hierarchy():
    """One area, one project, members A, B, C."""
    return Hierarchy(
        [Area(1, "Area", "#ff6b6b")],
        [Project(1, "P", "#ff6b6b", 1)],
        [Member(1, "A", 1), Member(2, "B", 1), Member(3, "C", 1)],
    )
