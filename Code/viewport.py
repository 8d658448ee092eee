# viewport.py
# Watches the drawing surface size. Any change (after a short debounce)
# triggers a full layout pass: cancel the running animation, recompute every
# anchor from scratch, rebuild the rings and start a new generation.

import logging
import random

import config
from hierarchy import Hierarchy
from layout import compute_layout
from rings import build_ring_connections

logger = logging.getLogger("radialmap.viewport")


class ViewportController:
    def __init__(self, scheduler, hierarchy=None, rng=None,
                 debounce_ms=config.RESIZE_DEBOUNCE_MS,
                 allow_self_loop=config.RING_SELF_LOOPS):
        self.scheduler = scheduler
        self.timer = scheduler.timer
        self.hierarchy = hierarchy or Hierarchy()
        self.rng = rng or random.Random()
        self.debounce_ms = debounce_ms
        self.allow_self_loop = allow_self_loop

        self.size = None           # last size a layout was computed for
        self.pending_size = None
        self.layout = None
        self.connections = []
        self.passes = 0
        self._debounce_id = None

    # --- Inbound Events ---

    def resize(self, width, height):
        """Called once at startup and on every surface size change."""
        size = (int(width), int(height))
        if size == (self.pending_size or self.size):
            return
        self.pending_size = size
        if self._debounce_id is not None:
            self.timer.after_cancel(self._debounce_id)
        self._debounce_id = self.timer.after(self.debounce_ms, self._flush)

    def on_configure(self, event):
        """tk <Configure> handler."""
        self.resize(event.width, event.height)

    def set_hierarchy(self, hierarchy):
        self.hierarchy = hierarchy
        if self.size is not None:
            self.relayout()

    def _flush(self):
        self._debounce_id = None
        if self.pending_size is None:
            return
        self.size = self.pending_size
        self.pending_size = None
        self.relayout()

    # --- Layout Pass ---

    def relayout(self):
        """Full recompute. The previous generation is cancelled before new poses exist."""
        if self.size is None:
            return None
        width, height = self.size
        self.scheduler.cancel()

        self.layout = compute_layout(self.hierarchy, width, height, rng=self.rng)
        members = [m for m in self.hierarchy.members if m.key in self.layout.member_poses]
        projects = [p for p in self.hierarchy.projects if p.id in self.layout.project_anchors]
        self.connections = build_ring_connections(projects, members, allow_self_loop=self.allow_self_loop)

        self.passes += 1
        gen = self.scheduler.start(self.layout, self.connections)
        logger.info("Layout pass %d at %dx%d (generation %d)", self.passes, width, height, gen)
        return gen

    def teardown(self):
        if self._debounce_id is not None:
            self.timer.after_cancel(self._debounce_id)
            self._debounce_id = None
        self.pending_size = None
        self.scheduler.cancel()
