"""Modal screen for a single review photo."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from review_feed.images import ImageLoader, LoadedImage
from review_feed.rows import ReviewRow

PLACEHOLDER = "Image unavailable"


def _human_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024 or unit == "MB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def describe_image(image: LoadedImage | None) -> Text:
    if image is None:
        return Text(PLACEHOLDER, style="dim italic")
    text = Text()
    text.append("▣ ", style="bold")
    text.append(image.content_type)
    text.append(f"  {_human_size(image.size)}", style="dim")
    return text


class PhotoViewerScreen(ModalScreen):
    """Shows one photo of a review. Esc or the Close button dismisses it."""

    DEFAULT_CSS = """
    PhotoViewerScreen {
        align: center middle;
    }
    PhotoViewerScreen > Vertical {
        width: 70%;
        height: auto;
        padding: 1 2;
        border: thick $accent;
        background: $surface;
    }
    PhotoViewerScreen #photo-body {
        height: auto;
        margin: 1 0;
    }
    PhotoViewerScreen Button {
        width: auto;
    }
    """

    BINDINGS = [Binding("escape", "close", "Close")]

    def __init__(self, row: ReviewRow, photo_index: int, loader: ImageLoader):
        super().__init__()
        self._row = row
        self._photo_index = photo_index
        self._loader = loader
        self.image: LoadedImage | None = None
        self.loaded = False

    @property
    def url(self) -> str:
        return self._row.photo_urls[self._photo_index]

    def compose(self) -> ComposeResult:
        title = f"Photo {self._photo_index + 1} of {len(self._row.photo_urls)} · {self._row.username}"
        with Vertical():
            yield Static(Text(title, style="bold"), id="photo-title")
            yield Static(Text(self.url, style="dim"), id="photo-url")
            yield Static(Text("Loading…", style="dim italic"), id="photo-body")
            yield Button("Close", id="photo-close")

    def on_mount(self) -> None:
        self._loader.load(
            self.url,
            self._show_image,
            run_in_worker=lambda work: self.app.run_worker(work, thread=True),
            call_on_owner=self.app.call_from_thread,
        )

    def _show_image(self, image: LoadedImage | None) -> None:
        if not self.is_attached:
            return
        self.image = image
        self.loaded = True
        self.query_one("#photo-body", Static).update(describe_image(image))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "photo-close":
            self.dismiss()

    def action_close(self) -> None:
        self.dismiss()
