from tkinter import filedialog

from ..core.image_handler import DEFAULT_OUTPUT_NAME, dialog_filetypes


def open_image_dialog(parent) -> str | None:
    path = filedialog.askopenfilename(parent=parent, title="Open Image", filetypes=dialog_filetypes())
    return path or None


def save_png_dialog(parent, initialfile: str | None = None) -> str | None:
    path = filedialog.asksaveasfilename(
        parent=parent,
        title="Save PNG",
        defaultextension=".png",
        initialfile=initialfile or DEFAULT_OUTPUT_NAME,
        filetypes=[("PNG", "*.png")],
    )
    return path or None
