"""Theme definitions for clipdeck terminal output."""

from dataclasses import dataclass, field

from clipdeck.history.types import ContentCategory


@dataclass
class Theme:
    """Visual theme configuration.

    All styling in one place for easy customization.
    """

    # Markers with Rich markup colors
    pinned_marker: str = "[yellow]●[/]"
    unpinned_marker: str = "[dim]○[/]"

    category_styles: dict[ContentCategory, str] = field(default_factory=lambda: {
        ContentCategory.TEXT: "",
        ContentCategory.URL: "blue underline",
        ContentCategory.EMAIL: "cyan",
        ContentCategory.COLOR: "magenta",
        ContentCategory.PHONE: "green",
        ContentCategory.CODE: "bright_black",
        ContentCategory.IMAGE: "italic",
    })

    # Text styles (Rich style strings)
    timestamp: str = "dim"
    event_type: str = "bold cyan"
    error: str = "bold red"
    warning: str = "yellow"

    # Longest preview shown per row before truncation
    preview_width: int = 60

    def marker(self, pinned: bool) -> str:
        return self.pinned_marker if pinned else self.unpinned_marker

    def category_style(self, category: ContentCategory) -> str:
        return self.category_styles.get(category, "")
