import logging
import os
import tkinter as tk
from tkinter import ttk, messagebox
from pathlib import Path

from tkinterdnd2 import DND_FILES, TkinterDnD

from ..core.image_handler import (
    DEFAULT_OUTPUT_NAME,
    SUPPORTED_INPUTS,
    InvalidImageError,
    load_image_with_alpha,
    save_png,
)
from ..core.pixel_buffer import PixelBuffer
from ..core.session import EditorSession, SessionState
from ..utils.config import AppConfig
from ..utils.helpers import human_readable_size, parse_dropped_paths
from ..utils.validators import TOLERANCE_MAX, TOLERANCE_MIN, clamp_tolerance
from .canvas_view import CanvasView
from .dialogs import open_image_dialog, save_png_dialog

logger = logging.getLogger(__name__)


class MainWindow(TkinterDnD.Tk):
    def __init__(self, config: AppConfig | None = None, max_edit_dimension: int | None = None):
        super().__init__()
        self.title("Background Eraser")
        self.geometry("1200x800")
        self.minsize(800, 600)

        # Config
        self.config_mgr = config or AppConfig()
        self.theme = self.config_mgr.theme or "System"
        self.max_edit_dimension = max_edit_dimension

        self.style = ttk.Style()
        self._apply_theme(self.theme)

        # State
        self.session = EditorSession(
            history_capacity=self.config_mgr.history_capacity,
            default_tolerance=self.config_mgr.tolerance,
        )
        self.current_file: Path | None = None
        self._busy = False

        self._build_menu()
        self._build_ribbon()
        self._build_layout()
        self._build_statusbar()

        self._update_status("Open an image, then click the area to erase")
        self._update_controls()
        self._bind_shortcuts()
        self.protocol("WM_DELETE_WINDOW", self._on_exit)

    # -------------------- Theme --------------------
    def _apply_theme(self, mode: str):
        elems = ["TFrame", "TLabelframe", "TLabelframe.Label", "TLabel", "TButton"]
        if mode.lower() == "dark":
            self.style.theme_use("clam")
            dark_bg = "#2b2b2b"
            self.configure(bg=dark_bg)
            for elem in elems:
                self.style.configure(elem, background=dark_bg, foreground="#e8e8e8")
        elif mode.lower() == "light":
            self.style.theme_use("clam")
            self.configure(bg="#f0f0f0")
            for elem in elems:
                self.style.configure(elem, background="#f0f0f0", foreground="#111")
        else:
            preferred = "vista" if os.name == "nt" else "default"
            if preferred in self.style.theme_names():
                self.style.theme_use(preferred)

    def _set_theme(self, theme: str):
        self.theme = theme
        self._apply_theme(theme)
        self.config_mgr.theme = theme
        self.config_mgr.save()

    # -------------------- Shortcuts --------------------
    def _bind_shortcuts(self):
        self.bind_all("<Control-o>", lambda e: self.open_image())
        self.bind_all("<Control-s>", lambda e: self.save_png())
        self.bind_all("<Control-z>", lambda e: self.undo())
        self.bind_all("<Control-r>", lambda e: self.reset())
        self.bind_all("<Control-plus>", lambda e: self.canvas_view.zoom_in())
        self.bind_all("<Control-equal>", lambda e: self.canvas_view.zoom_in())
        self.bind_all("<Control-minus>", lambda e: self.canvas_view.zoom_out())

    # -------------------- Menu --------------------
    def _build_menu(self):
        menubar = tk.Menu(self)

        file_menu = tk.Menu(menubar, tearoff=0)
        file_menu.add_command(label="Open... (Ctrl+O)", command=self.open_image)
        self.recent_menu = tk.Menu(file_menu, tearoff=0)
        file_menu.add_cascade(label="Open Recent", menu=self.recent_menu)
        self._refresh_recent_menu()
        file_menu.add_separator()
        file_menu.add_command(label="Save PNG... (Ctrl+S)", command=self.save_png)
        file_menu.add_command(label="New Image", command=self.new_image)
        file_menu.add_separator()
        file_menu.add_command(label="Exit", command=self._on_exit)
        menubar.add_cascade(label="File", menu=file_menu)

        edit_menu = tk.Menu(menubar, tearoff=0)
        edit_menu.add_command(label="Undo (Ctrl+Z)", command=self.undo)
        edit_menu.add_command(label="Reset to Original (Ctrl+R)", command=self.reset)
        menubar.add_cascade(label="Edit", menu=edit_menu)

        view_menu = tk.Menu(menubar, tearoff=0)
        view_menu.add_command(label="Zoom In (Ctrl++)", command=lambda: self.canvas_view.zoom_in())
        view_menu.add_command(label="Zoom Out (Ctrl+-)", command=lambda: self.canvas_view.zoom_out())
        theme_menu = tk.Menu(view_menu, tearoff=0)
        for name in ("Light", "Dark", "System"):
            theme_menu.add_command(label=name, command=lambda n=name: self._set_theme(n))
        view_menu.add_cascade(label="Theme", menu=theme_menu)
        menubar.add_cascade(label="View", menu=view_menu)

        help_menu = tk.Menu(menubar, tearoff=0)
        help_menu.add_command(label="About", command=self._about)
        menubar.add_cascade(label="Help", menu=help_menu)

        self.config(menu=menubar)

    # -------------------- Ribbon --------------------
    def _group(self, parent, text):
        f = ttk.LabelFrame(parent, text=text, padding=6)
        f.pack(side="left", padx=(0, 8), pady=2, fill="y")
        return f

    def _build_ribbon(self):
        ribbon = ttk.Frame(self)
        ribbon.grid(row=0, column=0, sticky="ew", padx=6, pady=(6, 2))
        self.columnconfigure(0, weight=1)

        gf = self._group(ribbon, "File")
        ttk.Button(gf, text="Open", width=10, command=self.open_image).pack(side="left", padx=2)
        self.save_btn = ttk.Button(gf, text="Save PNG", width=10, command=self.save_png)
        self.save_btn.pack(side="left", padx=2)
        self.new_btn = ttk.Button(gf, text="New Image", width=10, command=self.new_image)
        self.new_btn.pack(side="left", padx=2)

        eg = self._group(ribbon, "Edit")
        self.undo_btn = ttk.Button(eg, text="Undo", width=10, command=self.undo)
        self.undo_btn.pack(side="left", padx=2)
        self.reset_btn = ttk.Button(eg, text="Reset", width=10, command=self.reset)
        self.reset_btn.pack(side="left", padx=2)

        tg = self._group(ribbon, "Tolerance")
        self.tol_var = tk.IntVar(value=self.session.default_tolerance)
        ttk.Scale(tg, from_=TOLERANCE_MIN, to=TOLERANCE_MAX, orient="horizontal", length=180,
                  variable=self.tol_var,
                  command=lambda v: self._on_tolerance_change(int(float(v)))).pack(side="left", padx=6)
        self.tol_label = ttk.Label(tg, text=str(self.tol_var.get()), width=4)
        self.tol_label.pack(side="left")

        zg = self._group(ribbon, "Zoom")
        ttk.Button(zg, text="-", width=3, command=lambda: self.canvas_view.zoom_out()).pack(side="left", padx=2)
        self.zoom_level = ttk.Label(zg, text="100%", width=6, anchor="center")
        self.zoom_level.pack(side="left", padx=2)
        ttk.Button(zg, text="+", width=3, command=lambda: self.canvas_view.zoom_in()).pack(side="left", padx=2)

    # -------------------- Layout --------------------
    def _build_layout(self):
        ttk.Separator(self, orient="horizontal").grid(row=1, column=0, sticky="ew")
        self.canvas_view = CanvasView(
            self,
            on_click=self._on_canvas_click,
            on_cursor=self._update_cursor,
            on_zoom_change=self._update_zoom_info,
        )
        self.canvas_view.grid(row=2, column=0, sticky="nsew", padx=8, pady=8)
        self.rowconfigure(2, weight=1)

        for widget in (self, self.canvas_view.canvas):
            widget.drop_target_register(DND_FILES)
            widget.dnd_bind("<<Drop>>", self._on_drop)

    def _on_drop(self, event):
        paths = parse_dropped_paths(event.data)
        if not paths:
            return
        p = Path(paths[0])
        if not p.is_file() or p.suffix.lower() not in SUPPORTED_INPUTS:
            self._update_status(f"Unsupported file: {p.name}")
            return
        self._open_path(p)

    def _build_statusbar(self):
        self.statusbar = ttk.Frame(self)
        self.statusbar.grid(row=3, column=0, sticky="ew")
        self.statusbar.columnconfigure(0, weight=1)

        self.status_label = ttk.Label(self.statusbar, text="Status: Ready", anchor="w")
        self.status_label.grid(row=0, column=0, sticky="ew", padx=8)

        self.cursor_label = ttk.Label(self.statusbar, text="Cursor: -, -", width=20, anchor="e")
        self.cursor_label.grid(row=0, column=1, sticky="e", padx=8)

        self.dim_label = ttk.Label(self.statusbar, text="Image: -", width=48, anchor="e")
        self.dim_label.grid(row=0, column=2, sticky="e", padx=8)

        self.history_label = ttk.Label(self.statusbar, text="Undo: -", width=16, anchor="e")
        self.history_label.grid(row=0, column=3, sticky="e", padx=8)

    # -------------------- Update handlers --------------------
    def _update_status(self, text):
        self.status_label.config(text=f"Status: {text}")

    def _update_cursor(self, x, y):
        if x is None or y is None:
            self.cursor_label.config(text="Cursor: -, -")
        else:
            self.cursor_label.config(text=f"Cursor: {x}, {y}")

    def _update_zoom_info(self, zoom):
        self.zoom_level.config(text=f"{round(zoom * 100)}%")

    def _update_image_info(self, buffer: PixelBuffer | None = None):
        if buffer is None:
            self.dim_label.config(text="Image: -")
            self.history_label.config(text="Undo: -")
            return
        w, h = buffer.size
        self.dim_label.config(
            text=f"Image: {w}x{h} ~ {human_readable_size(w * h * 4)} | Transparent: {buffer.count_transparent()} px"
        )
        stats = self.session.history.get_stats()
        full = " (full)" if stats["undo_full"] else ""
        self.history_label.config(text=f"Undo: {stats['undo_count']}/{stats['limit']}{full}")

    def _update_controls(self):
        editing = self.session.state is SessionState.EDITING
        self.undo_btn.state(["!disabled"] if editing and self.session.can_undo() else ["disabled"])
        for btn in (self.reset_btn, self.save_btn, self.new_btn):
            btn.state(["!disabled"] if editing else ["disabled"])

    def _refresh_view(self):
        buffer = None
        if self.session.state is SessionState.EDITING:
            buffer = self.session.export_buffer()
            self.canvas_view.show(buffer)
        else:
            self.canvas_view.clear()
        self._update_controls()
        self._update_image_info(buffer)

    def _on_tolerance_change(self, tol: int):
        tol = clamp_tolerance(tol)
        self.session.default_tolerance = tol
        self.tol_label.config(text=str(tol))

    # -------------------- Canvas click --------------------
    def _on_canvas_click(self, x: int, y: int):
        if self._busy or self.session.state is not SessionState.EDITING:
            return
        self._busy = True
        self._update_status("Processing...")
        self.config(cursor="watch")
        # Let the busy indicator paint before the fill blocks the event loop
        self.after(10, lambda: self._run_fill(x, y))

    def _run_fill(self, x: int, y: int):
        try:
            cleared = self.session.select_at(x, y, self.tol_var.get())
        finally:
            self._busy = False
            self.config(cursor="")
        self._refresh_view()
        self._update_status(f"Erased {cleared} pixels" if cleared else "Nothing to erase here")

    # -------------------- Edit ops --------------------
    def undo(self):
        if self.session.state is not SessionState.EDITING:
            return
        if self.session.undo():
            self._refresh_view()
            self._update_status("Undo")
        else:
            self._update_status("Nothing to undo")

    def reset(self):
        if self.session.state is not SessionState.EDITING:
            return
        self.session.reset_to_original()
        self._refresh_view()
        self._update_status("Reset to original")

    def new_image(self):
        self.session.unload()
        self.current_file = None
        self.canvas_view.set_zoom(1.0)
        self._refresh_view()
        self._update_status("Open an image, then click the area to erase")

    # -------------------- File ops --------------------
    def _open_path(self, p: Path):
        try:
            img = load_image_with_alpha(p, max_edit_dimension=self.max_edit_dimension)
        except (FileNotFoundError, InvalidImageError) as e:
            logger.error("Failed to open %s: %s", p, e)
            messagebox.showerror("Error", f"Failed to open image:\n{e}")
            return
        self.session.load_image(PixelBuffer.from_image(img))
        self.current_file = p
        self.canvas_view.set_zoom(1.0)
        self._refresh_view()
        self.config_mgr.add_recent(p)
        self._refresh_recent_menu()
        self._update_status(f"Loaded: {p.name}")

    def open_image(self, path: str | None = None):
        if not path:
            path = open_image_dialog(self)
            if not path:
                return
        self._open_path(Path(path))

    def save_png(self):
        if self.session.state is not SessionState.EDITING:
            messagebox.showinfo("No image", "Open an image first.")
            return
        initial = f"{self.current_file.stem}-{DEFAULT_OUTPUT_NAME}" if self.current_file else None
        out = save_png_dialog(self, initialfile=initial)
        if not out:
            return
        try:
            save_png(self.session.export_buffer().to_image(), out)
        except OSError as e:
            logger.error("Failed to save %s: %s", out, e)
            messagebox.showerror("Error", f"Failed to save PNG:\n{e}")
            return
        self._update_status(f"Saved PNG: {Path(out).name}")

    # -------------------- Recent files --------------------
    def _refresh_recent_menu(self):
        self.recent_menu.delete(0, "end")
        if not self.config_mgr.recent_files:
            self.recent_menu.add_command(label="(Empty)", state="disabled")
            return
        for path_str in self.config_mgr.recent_files:
            p = Path(path_str)
            label = p.name if len(p.name) < 48 else "..." + p.name[-45:]
            self.recent_menu.add_command(label=label, command=lambda s=path_str: self._open_recent(s))

    def _open_recent(self, path_str: str):
        p = Path(path_str)
        if not p.exists():
            messagebox.showerror("Missing file", f"File not found:\n{p}")
            self.config_mgr.recent_files = [s for s in self.config_mgr.recent_files if s != path_str]
            self._refresh_recent_menu()
            return
        self._open_path(p)

    # -------------------- Misc --------------------
    def _about(self):
        messagebox.showinfo(
            "About",
            "Background Eraser\n"
            "- Click a region to make it transparent\n"
            "- Adjust tolerance to grow or shrink the match\n"
            f"- Undo up to {self.session.history.limit} steps, or reset to the original"
        )

    def _on_exit(self):
        self.config_mgr.tolerance = self.session.default_tolerance
        self.config_mgr.theme = self.theme
        self.config_mgr.save()
        self.destroy()


def run_app(config: AppConfig | None = None, max_edit_dimension: int | None = None):
    app = MainWindow(config=config, max_edit_dimension=max_edit_dimension)
    app.mainloop()
