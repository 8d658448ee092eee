# animation.py
# The floating animation. Every member runs its own resumable chain
# (stagger delay -> step -> step -> ...) multiplexed on one timer source,
# the same `after` / `after_cancel` pair tkinter widgets expose. A frame loop
# eases each member between its step start point and its step target.
#
# Live poses belong to one layout generation. Starting a new generation
# cancels every chain of the previous one first; handles and callbacks that
# still carry the old generation number are rejected.

import logging
import math
import random
import time
from dataclasses import dataclass

import config
import snapshot
from utils import ease_quad_in_out, lerp, polar

logger = logging.getLogger("radialmap.animation")

# --- Chain States ---
UNSCHEDULED = "UNSCHEDULED"
PENDING = "PENDING"
ANIMATING = "ANIMATING"
PAUSED = "PAUSED"
CANCELLED = "CANCELLED"


class StaleHandleError(LookupError):
    """A pose handle from a superseded (or torn down) layout generation."""


@dataclass(frozen=True)
class PoseHandle:
    generation: int
    key: tuple  # (project id, member id)


class WidgetTimer:
    """Timer source backed by a tk widget's event loop."""

    def __init__(self, widget, clock=time.monotonic):
        self.widget = widget
        self.clock = clock

    def after(self, ms, callback):
        return self.widget.after(max(0, int(ms)), callback)

    def after_cancel(self, token):
        self.widget.after_cancel(token)

    def now(self):
        return self.clock() * 1000.0


def next_target(pose, max_wander, rng,
                pullback=config.PULLBACK_RATIO, wander=config.WANDER_RATIO):
    """
    Where a member floats to on its next step.

    An outlier (further than max_wander from home) is pulled back to
    pullback * max_wander; otherwise it wanders to a random point within
    wander * max_wander of its base pose.
    """
    if pose.offset() > max_wander:
        angle = math.atan2(pose.base_y - pose.y, pose.base_x - pose.x)
        return polar(pose.base_x, pose.base_y, angle, max_wander * pullback)

    angle = rng.random() * 2 * math.pi
    dist = rng.random() * max_wander * wander
    return polar(pose.base_x, pose.base_y, angle, dist)


class _Chain:
    """Per-member animation state; only the scheduler touches it."""

    def __init__(self, key, pose, max_wander):
        self.key = key
        self.pose = pose
        self.max_wander = max_wander
        self.state = UNSCHEDULED
        self.timer_id = None
        self.steps = 0
        self.segment = None  # (start_ms, from_x, from_y, to_x, to_y)

    def settle(self):
        """Land the current segment at its target."""
        if self.segment is not None:
            _, _, _, to_x, to_y = self.segment
            self.pose.x, self.pose.y = to_x, to_y
            self.segment = None

    def begin_segment(self, now, to_x, to_y):
        self.segment = (now, self.pose.x, self.pose.y, to_x, to_y)

    def interpolate(self, now, duration):
        if self.segment is None:
            return
        start, from_x, from_y, to_x, to_y = self.segment
        t = ease_quad_in_out((now - start) / duration if duration > 0 else 1.0)
        self.pose.x = lerp(from_x, to_x, t)
        self.pose.y = lerp(from_y, to_y, t)


class FloatingScheduler:
    """
    Owns the live member poses of the current layout generation and keeps
    them floating.

    timer: object with after(ms, callback) -> token, after_cancel(token)
           and now() -> milliseconds.
    on_frame: optional callable receiving a FrameSnapshot after every frame.
    """

    def __init__(self, timer, rng=None, on_frame=None,
                 step_ms=config.STEP_DURATION_MS,
                 max_delay_ms=config.MAX_START_DELAY_MS,
                 frame_ms=config.FRAME_INTERVAL_MS):
        self.timer = timer
        self.rng = rng or random.Random()
        self.on_frame = on_frame
        self.step_ms = step_ms
        self.max_delay_ms = max_delay_ms
        self.frame_ms = frame_ms

        self.generation = 0
        self.layout = None
        self.connections = []
        self.paused = False
        self._chains = {}
        self._frame_id = None

    # --- Lifecycle ---

    def start(self, layout, connections):
        """
        Cancel-then-start barrier: the previous generation is fully cancelled
        before the poses of `layout` are adopted. Returns the new generation.
        """
        self.cancel()
        self.generation += 1
        gen = self.generation

        self.layout = layout
        self.connections = list(connections)
        self.paused = False
        self._chains = {
            key: _Chain(key, pose, layout.max_wander(key[0]))
            for key, pose in layout.member_poses.items()
        }
        for chain in self._chains.values():
            self._schedule_entry(gen, chain)

        self._frame_id = self.timer.after(self.frame_ms, lambda g=gen: self._frame(g))
        logger.info("Started generation %d with %d members", gen, len(self._chains))
        return gen

    def cancel(self):
        """Stops every chain, stagger timer and the frame loop. Safe to call repeatedly."""
        if not self._chains and self._frame_id is None and self.layout is None:
            return
        for chain in self._chains.values():
            self._cancel_timer(chain)
            chain.state = CANCELLED
        if self._frame_id is not None:
            self.timer.after_cancel(self._frame_id)
            self._frame_id = None

        logger.debug("Cancelled generation %d", self.generation)
        # Invalidate handles of the generation being torn down
        self.generation += 1
        self._chains = {}
        self.layout = None
        self.connections = []

    def pause(self):
        """Freezes members where they are; poses stay valid."""
        if self.paused or self.layout is None:
            return
        for chain in self._chains.values():
            self._cancel_timer(chain)
            chain.settle()
            chain.state = PAUSED
        if self._frame_id is not None:
            self.timer.after_cancel(self._frame_id)
            self._frame_id = None
        self.paused = True
        self._emit_frame()

    def resume(self):
        if not self.paused or self.layout is None:
            return
        gen = self.generation
        self.paused = False
        for chain in self._chains.values():
            self._schedule_entry(gen, chain)
        self._frame_id = self.timer.after(self.frame_ms, lambda g=gen: self._frame(g))

    @property
    def active(self):
        return self.layout is not None

    # --- Handles ---

    def handle(self, key):
        if key not in self._chains:
            raise KeyError(key)
        return PoseHandle(self.generation, key)

    def handles(self):
        return [PoseHandle(self.generation, key) for key in self._chains]

    def pose(self, handle):
        if handle.generation != self.generation or handle.key not in self._chains:
            raise StaleHandleError(f"Pose {handle.key} of generation {handle.generation} no longer exists")
        return self._chains[handle.key].pose

    def state(self, key):
        chain = self._chains.get(key)
        return chain.state if chain else UNSCHEDULED

    def poses(self):
        return {key: chain.pose for key, chain in self._chains.items()}

    def pending_timers(self):
        """Number of outstanding timers (stagger/step per member plus the frame loop)."""
        count = sum(1 for c in self._chains.values() if c.timer_id is not None)
        return count + (1 if self._frame_id is not None else 0)

    # --- Chain Steps ---

    def _schedule_entry(self, gen, chain):
        delay = self.rng.random() * self.max_delay_ms
        chain.state = PENDING
        chain.timer_id = self.timer.after(delay, lambda g=gen, k=chain.key: self._begin(g, k))

    def _begin(self, gen, key):
        chain = self._live_chain(gen, key)
        if chain is None:
            return
        chain.timer_id = None
        chain.state = ANIMATING
        self._step(gen, key)

    def _step(self, gen, key):
        chain = self._live_chain(gen, key)
        if chain is None:
            return
        chain.timer_id = None
        chain.settle()
        to_x, to_y = next_target(chain.pose, chain.max_wander, self.rng)
        chain.begin_segment(self.timer.now(), to_x, to_y)
        chain.steps += 1
        chain.timer_id = self.timer.after(self.step_ms, lambda g=gen, k=key: self._step(g, k))

    def _live_chain(self, gen, key):
        if gen != self.generation or self.paused:
            return None
        return self._chains.get(key)

    def _cancel_timer(self, chain):
        if chain.timer_id is not None:
            self.timer.after_cancel(chain.timer_id)
            chain.timer_id = None

    # --- Frames ---

    def advance(self, now=None):
        """Moves every animating member to its eased position at `now`."""
        now = self.timer.now() if now is None else now
        for chain in self._chains.values():
            chain.interpolate(now, self.step_ms)

    def _frame(self, gen):
        if gen != self.generation:
            return
        self._frame_id = None
        self.advance()
        self._emit_frame()
        self._frame_id = self.timer.after(self.frame_ms, lambda g=gen: self._frame(g))

    def snapshot(self):
        if self.layout is None:
            return None
        return snapshot.build_snapshot(self.layout, self.connections, self.poses())

    def _emit_frame(self):
        if self.on_frame is not None and self.layout is not None:
            self.on_frame(self.snapshot())
