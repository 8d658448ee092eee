# components.py
# Renderers for frame snapshots. RadialCanvas draws on a tk Canvas every
# frame; render_snapshot_image draws the same records with Pillow so a frame
# can be exported as a PNG without a display.

import logging
import math
import tkinter as tk
from pathlib import Path

from PIL import Image, ImageColor, ImageDraw, ImageFont, ImageOps, ImageTk

import config

logger = logging.getLogger("radialmap.components")


def load_avatar(path, size, root=None):
    """
    Returns a circular RGBA avatar of `size` pixels, or None when the image
    is missing or unreadable.
    """
    if not path:
        return None
    p = Path(path)
    if root is not None and not p.is_absolute():
        p = Path(root) / p
    try:
        with Image.open(p) as img:
            avatar = ImageOps.fit(img.convert("RGBA"), (size, size))
    except (OSError, ValueError) as e:
        logger.debug("No avatar for %s: %s", p, e)
        return None

    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, size - 1, size - 1), fill=255)
    avatar.putalpha(mask)
    return avatar


def _rgba(color, alpha=255):
    r, g, b = ImageColor.getrgb(color)[:3]
    return (r, g, b, alpha)


def _font(size):
    return ImageFont.load_default(size=size)


def _label(draw, x, y, text, size, fill):
    """Draws `text` centered on x with its bottom edge on y; returns its box."""
    font = _font(size)
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    w, h = right - left, bottom - top
    draw.text((x - w / 2 - left, y - h - top), text, fill=fill, font=font)
    return x - w / 2, y - h, x + w / 2, y


def render_snapshot_image(snapshot, size=None, avatar_root=None, background=config.CANVAS_BACKGROUND):
    """
    Draws one frame into a Pillow image. The frame is drawn at the snapshot
    viewport size, then scaled to `size` (width, height) when given.
    """
    frame_size = (max(1, int(snapshot.width)), max(1, int(snapshot.height)))
    image = Image.new("RGBA", frame_size, _rgba(background))

    # Translucent fills go on their own layer
    overlay = Image.new("RGBA", frame_size, (0, 0, 0, 0))
    od = ImageDraw.Draw(overlay)
    for a in snapshot.areas:
        od.ellipse((a.x - a.rx, a.y - a.ry, a.x + a.rx, a.y + a.ry),
                   fill=_rgba(a.fill, 25), outline=_rgba(a.stroke, 128), width=1)
    for p in snapshot.projects:
        od.ellipse((p.x - p.radius, p.y - p.radius, p.x + p.radius, p.y + p.radius),
                   fill=_rgba(p.color, 90), outline=_rgba(p.color, 128), width=1)
    for c in snapshot.connections:
        od.line((c.x1, c.y1, c.x2, c.y2), fill=_rgba(c.stroke, 128), width=2)
    image = Image.alpha_composite(image, overlay)

    draw = ImageDraw.Draw(image)
    for a in snapshot.areas:
        left, _, right, bottom = _label(draw, a.x, a.y, a.label, config.AREA_FONT_SIZE, config.AREA_LABEL_COLOR)
        draw.line((left, bottom + 5, right, bottom + 5), fill=a.underline, width=3)

    for p in snapshot.projects:
        _label(draw, p.x, p.y - 5, p.label, config.PROJECT_FONT_SIZE, config.PROJECT_LABEL_COLOR)
        _label(draw, p.x, p.y + 15, p.count_label, config.COUNT_FONT_SIZE, config.COUNT_LABEL_COLOR)

    for m in snapshot.members:
        r = m.radius
        draw.ellipse((m.x - r, m.y - r, m.x + r, m.y + r), fill=config.MEMBER_FILL, outline=m.stroke, width=2)
        avatar = load_avatar(m.avatar, m.avatar_size, root=avatar_root)
        if avatar is not None:
            half = m.avatar_size // 2
            image.paste(avatar, (int(m.x) - half, int(m.y) - half), avatar)
        _label(draw, m.x, m.y + config.MEMBER_LABEL_OFFSET, m.label, config.MEMBER_FONT_SIZE, config.MEMBER_LABEL_COLOR)

    if size is not None and tuple(size) != frame_size:
        image = image.resize((max(1, int(size[0])), max(1, int(size[1]))), Image.LANCZOS)
    return image


def export_png(snapshot, size, path, avatar_root=None):
    image = render_snapshot_image(snapshot, size=size, avatar_root=avatar_root)
    image.convert("RGB").save(path, format="PNG")
    logger.info("Exported frame to %s", path)
    return path


class RadialCanvas:
    """
    The living map on a tk Canvas.
    Features: redraw per frame, ring highlights, hover tooltip, resize forwarding.
    """
    def __init__(self, parent, on_resize=None, on_hover=None, avatar_root=None):
        self.on_resize = on_resize
        self.on_hover = on_hover
        self.avatar_root = avatar_root
        self.highlights = []
        self.snapshot = None
        self.hovered = None
        self._mouse = None
        self._photos = {}  # (avatar, size) -> PhotoImage, kept alive for tk

        self.canvas = tk.Canvas(parent, bg=config.CANVAS_BACKGROUND, highlightthickness=0)
        self.canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

        self.canvas.bind("<Configure>", self._on_configure)
        self.canvas.bind("<Motion>", self._on_motion)
        self.canvas.bind("<Leave>", self._on_leave)

    # --- Events ---

    def _on_configure(self, event):
        if self.on_resize:
            self.on_resize(event.width, event.height)

    def _on_motion(self, event):
        self._mouse = (event.x, event.y)
        hovered = self.member_at(event.x, event.y)
        if (hovered and hovered.key) != (self.hovered and self.hovered.key):
            self.hovered = hovered
            if self.on_hover:
                self.on_hover(hovered)
        if self.hovered is not None and self.snapshot is not None:
            # Frames stop while paused; keep the tip following the mouse
            self.draw(self.snapshot)

    def _on_leave(self, event):
        self._mouse = None
        if self.hovered is not None:
            self.hovered = None
            if self.on_hover:
                self.on_hover(None)
            if self.snapshot is not None:
                self.draw(self.snapshot)

    def member_at(self, x, y):
        if self.snapshot is None:
            return None
        # Topmost member wins
        for m in reversed(self.snapshot.members):
            if math.hypot(x - m.x, y - m.y) <= m.radius:
                return m
        return None

    def set_highlights(self, highlights):
        """Updates the ring highlights and triggers a redraw."""
        self.highlights = highlights
        if self.snapshot is not None:
            self.draw(self.snapshot)

    def set_avatar_root(self, root):
        self.avatar_root = root
        self._photos.clear()

    # --- Drawing ---

    def _photo(self, member):
        key = (member.avatar, member.avatar_size)
        if key not in self._photos:
            avatar = load_avatar(member.avatar, member.avatar_size, root=self.avatar_root)
            self._photos[key] = ImageTk.PhotoImage(avatar) if avatar is not None else None
        return self._photos[key]

    def draw(self, snapshot):
        self.snapshot = snapshot
        c = self.canvas
        c.delete("all")

        # 1. Areas (dashed ellipses + underlined names)
        for a in snapshot.areas:
            c.create_oval(a.x - a.rx, a.y - a.ry, a.x + a.rx, a.y + a.ry,
                          outline=a.stroke, dash=(5, 5), width=1)
        for a in snapshot.areas:
            text_id = c.create_text(a.x, a.y, text=a.label, fill=config.AREA_LABEL_COLOR,
                                    font=("Arial", config.AREA_FONT_SIZE, "bold"), anchor="s")
            bbox = c.bbox(text_id)
            if bbox:
                x1, _, x2, y2 = bbox
                c.create_line(x1, y2 + 5, x2, y2 + 5, fill=a.underline, width=3)

        # 2. Projects
        for p in snapshot.projects:
            r = p.radius
            c.create_oval(p.x - r, p.y - r, p.x + r, p.y + r,
                          fill=p.color, stipple="gray25", outline=p.color, width=1)

        # 3. Highlights behind the rings
        positions = {m.key: (m.x, m.y, m.radius) for m in snapshot.members}
        for h in self.highlights:
            color = h.get("color", "yellow")
            width = h.get("width", 8)
            for key in h.get("nodes", []):
                if key not in positions:
                    continue
                x, y, r = positions[key]
                rad = r + width / 2
                c.create_oval(x - rad, y - rad, x + rad, y + rad, fill=color, outline=color)
            for u, v in h.get("edges", []):
                if u not in positions or v not in positions:
                    continue
                x1, y1, _ = positions[u]
                x2, y2, _ = positions[v]
                c.create_line(x1, y1, x2, y2, fill=color, width=width, capstyle=tk.ROUND)

        # 4. Rings
        for link in snapshot.connections:
            c.create_line(link.x1, link.y1, link.x2, link.y2, fill=link.stroke, width=config.LINK_WIDTH)

        # 5. Project labels on top of the rings
        for p in snapshot.projects:
            c.create_text(p.x, p.y - 5, text=p.label, fill=config.PROJECT_LABEL_COLOR,
                          font=("Arial", config.PROJECT_FONT_SIZE, "bold"), anchor="s")
            c.create_text(p.x, p.y + 15, text=p.count_label, fill=config.COUNT_LABEL_COLOR,
                          font=("Arial", config.COUNT_FONT_SIZE), anchor="s")

        # 6. Members
        for m in snapshot.members:
            r = m.radius
            outline_width = 3 if self.hovered is not None and self.hovered.key == m.key else 2
            c.create_oval(m.x - r, m.y - r, m.x + r, m.y + r,
                          fill=config.MEMBER_FILL, outline=m.stroke, width=outline_width)
            photo = self._photo(m)
            if photo is not None:
                c.create_image(m.x, m.y, image=photo)
            else:
                c.create_text(m.x, m.y, text=m.label[:1].upper(), fill=m.stroke,
                              font=("Arial", int(r * 0.8), "bold"))
            c.create_text(m.x, m.y + config.MEMBER_LABEL_OFFSET, text=m.label,
                          fill=config.MEMBER_LABEL_COLOR, font=("Arial", config.MEMBER_FONT_SIZE), anchor="s")

        # 7. Tooltip for the hovered member
        if self.hovered is not None and self._mouse is not None:
            mx, my = self._mouse
            tip = c.create_text(mx + 14, my + 14, text=f"{self.hovered.label}", anchor="nw",
                                fill="#e7e9ee", font=("Arial", 10))
            bbox = c.bbox(tip)
            if bbox:
                x1, y1, x2, y2 = bbox
                bg = c.create_rectangle(x1 - 6, y1 - 4, x2 + 6, y2 + 4, fill="#111319", outline="")
                c.tag_lower(bg, tip)
