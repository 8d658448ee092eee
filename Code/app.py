import argparse
import logging
import random
import tkinter as tk
from importlib import resources
from pathlib import Path
from tkinter import filedialog, messagebox

import config
import metric_visualizations
from animation import FloatingScheduler, WidgetTimer
from components import RadialCanvas, export_png
from hierarchy import Hierarchy
from hierarchy_io import HierarchyError, load_hierarchy, load_hierarchy_csv, load_hierarchy_json
from logging_config import setup_logging
from rings import ring_graph
from utils import calculate_metric
from viewport import ViewportController

logger = logging.getLogger("radialmap.app")

# Shipped inside the radialmap_data package so installs find it too
SAMPLE_DATA = resources.files("radialmap_data") / "sample_hierarchy.json"
STATUS_METRICS = ["Members", "Connections", "Rings", "Density", "Avg Degree"]


class RadialMapApp:
    def __init__(self, root, hierarchy=None, avatar_root=None, rng=None):
        self.root = root
        self.root.title("Living Radial Map")
        w, h = config.DEFAULT_VIEWPORT
        self.root.geometry(f"{w}x{h}")

        # --- Backend Data ---
        self.hierarchy = hierarchy or Hierarchy()
        self.avatar_root = avatar_root

        # --- State ---
        self.highlight_rings = False
        self.hovered = None
        self._status_pass = 0

        self.setup_ui()

        # --- Engine ---
        self.timer = WidgetTimer(self.root)
        rng = rng or random.Random()
        self.scheduler = FloatingScheduler(self.timer, rng=rng, on_frame=self.on_frame)
        self.controller = ViewportController(self.scheduler, hierarchy=self.hierarchy, rng=rng)

        self.root.protocol("WM_DELETE_WINDOW", self.on_close)
        self.update_status()

    def setup_ui(self):
        # Toolbar
        toolbar_frame = tk.Frame(self.root, bd=1, relief=tk.RAISED)
        toolbar_frame.pack(side=tk.TOP, fill=tk.X)
        self.build_toolbar(toolbar_frame)

        # Footer Status
        self.status_label = tk.Label(self.root, text="", bd=1, relief=tk.SUNKEN, anchor=tk.W)
        self.status_label.pack(side=tk.BOTTOM, fill=tk.X)

        # Main Layout
        main_container = tk.Frame(self.root)
        main_container.pack(fill=tk.BOTH, expand=True)

        self.map = RadialCanvas(main_container, on_resize=self.on_resize, on_hover=self.on_hover,
                                avatar_root=self.avatar_root)

    def build_toolbar(self, parent):
        r1 = tk.Frame(parent)
        r1.pack(fill=tk.X, pady=2)

        tk.Label(r1, text="| Data:", fg="#888").pack(side=tk.LEFT, padx=5)
        tk.Button(r1, text="Open JSON", command=self.open_json).pack(side=tk.LEFT, padx=2)
        tk.Button(r1, text="Open CSV...", command=self.open_csv).pack(side=tk.LEFT, padx=2)
        tk.Button(r1, text="Save as Image", command=self.export_as_image, bg="#e0e0e0").pack(side=tk.LEFT, padx=2)

        tk.Label(r1, text="| View:", fg="#888").pack(side=tk.LEFT, padx=5)
        self.rings_btn = tk.Button(r1, text="Highlight Rings", command=self.toggle_ring_highlights)
        self.rings_btn.pack(side=tk.LEFT, padx=2)
        self.pause_btn = tk.Button(r1, text="Pause", command=self.toggle_pause, width=8)
        self.pause_btn.pack(side=tk.LEFT, padx=2)

    # --- Engine Callbacks ---

    def on_resize(self, width, height):
        self.controller.resize(width, height)

    def on_frame(self, snapshot):
        self.map.draw(snapshot)
        # Metrics only change with a new layout pass
        if self.controller.passes != self._status_pass:
            self._status_pass = self.controller.passes
            self.sync_pause_button()
            if self.highlight_rings:
                self.map.set_highlights(metric_visualizations.get_ring_highlights(self.current_graph()))
            self.update_status()

    def on_hover(self, member):
        self.hovered = member
        self.update_status()

    # --- Data ---

    def set_hierarchy(self, hierarchy, avatar_root=None):
        self.hierarchy = hierarchy
        self.avatar_root = avatar_root
        self.map.set_avatar_root(avatar_root)
        self.controller.set_hierarchy(hierarchy)
        if self.highlight_rings:
            self.map.set_highlights(metric_visualizations.get_ring_highlights(self.current_graph()))
        self.sync_pause_button()
        self.update_status()

    def open_json(self):
        fp = filedialog.askopenfilename(filetypes=[("JSON", "*.json"), ("All Files", "*.*")])
        if not fp: return
        self._load(lambda: load_hierarchy_json(fp), Path(fp).parent)

    def open_csv(self):
        folder = filedialog.askdirectory(title="Folder with areas.csv, projects.csv, members.csv")
        if not folder: return
        folder = Path(folder)
        self._load(lambda: load_hierarchy_csv(folder / "areas.csv", folder / "projects.csv",
                                              folder / "members.csv"), folder)

    def _load(self, read, avatar_root):
        try:
            hierarchy = read()
        except HierarchyError as e:
            # The previous hierarchy stays on screen
            logger.error("Failed to load hierarchy: %s", e)
            messagebox.showerror("Error", f"Failed to load file:\n{e}")
            return
        self.set_hierarchy(hierarchy, avatar_root)

    def export_as_image(self):
        snapshot = self.scheduler.snapshot()
        if snapshot is None:
            messagebox.showinfo("Info", "Nothing to export yet.")
            return

        fp = filedialog.asksaveasfilename(
            defaultextension=".png",
            filetypes=[("PNG Image", "*.png"), ("All Files", "*.*")],
            title="Save Map Image"
        )
        if not fp: return

        try:
            export_png(snapshot, (snapshot.width, snapshot.height), fp, avatar_root=self.avatar_root)
        except OSError as e:
            logger.error("Export failed: %s", e)
            messagebox.showerror("Export Error", f"Could not save PNG:\n{e}")
            return
        messagebox.showinfo("Success", f"Image saved to:\n{fp}")

    # --- View ---

    def current_graph(self):
        return ring_graph(self.controller.connections, self.hierarchy.resolved_members())

    def toggle_ring_highlights(self):
        # Toggle: clicking again turns the overlay off
        self.highlight_rings = not self.highlight_rings
        if self.highlight_rings:
            highlights = metric_visualizations.get_ring_highlights(self.current_graph())
            self.rings_btn.config(bg="#87CEFA", relief=tk.SUNKEN)
        else:
            highlights = []
            self.rings_btn.config(bg="#f0f0f0", relief=tk.RAISED)
        self.map.set_highlights(highlights)

    def toggle_pause(self):
        if self.scheduler.paused:
            self.scheduler.resume()
        else:
            self.scheduler.pause()
        self.sync_pause_button()

    def sync_pause_button(self):
        """A new layout pass starts unpaused, so the label follows the scheduler."""
        if self.scheduler.paused:
            self.pause_btn.config(text="Resume", relief=tk.SUNKEN)
        else:
            self.pause_btn.config(text="Pause", relief=tk.RAISED)

    def update_status(self):
        G = self.current_graph()
        parts = [f"{name}: {calculate_metric(G, name)}" for name in STATUS_METRICS]
        text = "  |  ".join(parts)
        if self.hovered is not None:
            project = self.hierarchy.project_by_id().get(self.hovered.key[0])
            text += f"  |  {self.hovered.label}" + (f" ({project.name})" if project else "")
        self.status_label.config(text=text)

    def on_close(self):
        self.controller.teardown()
        self.root.destroy()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Living radial map of areas, projects and members.")
    parser.add_argument("path", nargs="?", default=str(SAMPLE_DATA),
                        help="hierarchy .json file, or a folder with areas.csv, projects.csv and members.csv")
    parser.add_argument("--log-level", default="INFO",
                        type=str.upper, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    args = parser.parse_args(argv)

    setup_logging(args.log_level, log_file=args.log_file)

    path = Path(args.path)
    try:
        hierarchy = load_hierarchy(path)
    except HierarchyError as e:
        logger.error("%s", e)
        return 1

    root = tk.Tk()
    RadialMapApp(root, hierarchy, avatar_root=path if path.is_dir() else path.parent)
    root.mainloop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
