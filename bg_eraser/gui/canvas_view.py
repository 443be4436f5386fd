import tkinter as tk
from tkinter import ttk

from PIL import ImageTk

from ..core.pixel_buffer import PixelBuffer
from ..core.transparency import render_for_display
from ..utils.validators import ZOOM_STEP, validate_zoom


class CanvasView(ttk.Frame):
    """Scrollable, zoomable view of a buffer that reports clicks in image pixels."""

    def __init__(self, parent, on_click=None, on_cursor=None, on_zoom_change=None):
        super().__init__(parent)
        self.on_click = on_click or (lambda x, y: None)
        self.on_cursor = on_cursor or (lambda x, y: None)
        self.on_zoom_change = on_zoom_change or (lambda z: None)

        self.buffer: PixelBuffer | None = None
        self.zoom = 1.0
        self._display_image = None

        self._build_ui()

    # ---------- UI setup ----------
    def _build_ui(self):
        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

        self.canvas = tk.Canvas(self, bg="#3a3a3a", highlightthickness=0, cursor="cross")
        self.canvas.grid(row=0, column=0, sticky="nsew")

        self.hbar = ttk.Scrollbar(self, orient="horizontal", command=self.canvas.xview)
        self.vbar = ttk.Scrollbar(self, orient="vertical", command=self.canvas.yview)
        self.canvas.configure(xscrollcommand=self.hbar.set, yscrollcommand=self.vbar.set)
        self.hbar.grid(row=1, column=0, sticky="ew")
        self.vbar.grid(row=0, column=1, sticky="ns")

        self.canvas.bind("<Motion>", self._on_mouse_move)
        self.canvas.bind("<Leave>", lambda e: self.on_cursor(None, None))
        self.canvas.bind("<ButtonPress-1>", self._on_mouse_down)

        self.canvas.bind("<Button-2>", self._on_pan_press)
        self.canvas.bind("<B2-Motion>", self._on_pan_drag)

        self.canvas.bind("<MouseWheel>", self._on_mouse_wheel)
        self.canvas.bind("<Button-4>", self._on_mouse_wheel)
        self.canvas.bind("<Button-5>", self._on_mouse_wheel)

    # ---------- Content ----------
    def show(self, buffer: PixelBuffer | None):
        self.buffer = buffer
        self.refresh()

    def clear(self):
        self.buffer = None
        self._display_image = None
        self.canvas.delete("all")
        self.canvas.config(scrollregion=(0, 0, 0, 0))

    def set_zoom(self, zoom: float):
        zoom = validate_zoom(zoom)
        if self.zoom != zoom:
            self.zoom = zoom
            self.refresh()
            self.on_zoom_change(self.zoom)

    def zoom_in(self):
        self.set_zoom(self.zoom + ZOOM_STEP)

    def zoom_out(self):
        self.set_zoom(self.zoom - ZOOM_STEP)

    def refresh(self):
        if self.buffer is None:
            self.clear()
            return
        composed = render_for_display(self.buffer, self.zoom)
        self._display_image = ImageTk.PhotoImage(composed)
        self.canvas.delete("all")
        self.canvas.config(scrollregion=(0, 0, composed.width, composed.height))
        self.canvas.create_image(0, 0, image=self._display_image, anchor="nw")

    # ---------- Events ----------
    def _canvas_to_image(self, cx, cy):
        x = self.canvas.canvasx(cx)
        y = self.canvas.canvasy(cy)
        return int(x // self.zoom), int(y // self.zoom)

    def _on_mouse_move(self, event):
        if self.buffer is None:
            return
        ix, iy = self._canvas_to_image(event.x, event.y)
        if self.buffer.in_bounds(ix, iy):
            self.on_cursor(ix, iy)
        else:
            self.on_cursor(None, None)

    def _on_mouse_down(self, event):
        if self.buffer is None:
            return
        self.canvas.focus_set()
        self.on_click(*self._canvas_to_image(event.x, event.y))

    def _on_pan_press(self, event):
        self.canvas.scan_mark(event.x, event.y)

    def _on_pan_drag(self, event):
        self.canvas.scan_dragto(event.x, event.y, gain=1)

    def _on_mouse_wheel(self, event):
        ctrl = (event.state & 0x4) != 0
        if hasattr(event, "delta") and event.delta != 0:
            step = 1 if event.delta > 0 else -1
        elif event.num == 4:
            step = 1
        elif event.num == 5:
            step = -1
        else:
            return
        if ctrl:
            self.set_zoom(self.zoom + step * ZOOM_STEP)
        else:
            self.canvas.yview_scroll(-step, "units")
