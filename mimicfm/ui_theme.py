"""Colour palettes for the window chrome, grid, menu, and status bar.

``plain`` has no styles at all and is forced by ``--no-color``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """One named palette; every field is an SGR prefix or the empty string."""

    name: str
    reset: str
    window_border: str
    window_title: str
    path_folder: str
    path_current: str
    path_separator: str
    folder_icon: str
    folder_name: str
    folder_selected: str
    file_icon: str
    file_name: str
    file_selected: str
    selection_marker: str
    menu_border: str
    menu_item: str
    menu_shortcut: str
    status_info: str
    status_error: str
    category_code: str
    category_document: str
    category_image: str
    category_archive: str
    category_media: str
    category_data: str
    category_executable: str

    def paint(self, style: str, text: str) -> str:
        """Wrap ``text`` in ``style`` and a reset; unstyled themes return it untouched."""
        if not style or not text:
            return text
        return f"{style}{text}{self.reset}"


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    window_border="\033[36m",
    window_title="\033[1;34m",
    path_folder="\033[33m",
    path_current="\033[1;34m",
    path_separator="\033[36m",
    folder_icon="\033[33m",
    folder_name="\033[33m",
    folder_selected="\033[1;35m",
    file_icon="\033[34m",
    file_name="\033[90m",
    file_selected="\033[1;36m",
    selection_marker="\033[35m",
    menu_border="\033[36m",
    menu_item="\033[37m",
    menu_shortcut="\033[90m",
    status_info="\033[36m",
    status_error="\033[1;31m",
    category_code="\033[32m",
    category_document="\033[37m",
    category_image="\033[92m",
    category_archive="\033[33m",
    category_media="\033[35m",
    category_data="\033[95m",
    category_executable="\033[31m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    window_border="\033[38;5;31m",
    window_title="\033[1;38;5;45m",
    path_folder="\033[38;5;117m",
    path_current="\033[1;38;5;45m",
    path_separator="\033[38;5;31m",
    folder_icon="\033[38;5;45m",
    folder_name="\033[38;5;153m",
    folder_selected="\033[1;38;5;229m",
    file_icon="\033[38;5;39m",
    file_name="\033[38;5;252m",
    file_selected="\033[1;38;5;229m",
    selection_marker="\033[38;5;229m",
    menu_border="\033[38;5;39m",
    menu_item="\033[38;5;252m",
    menu_shortcut="\033[2;38;5;110m",
    status_info="\033[38;5;117m",
    status_error="\033[1;38;5;203m",
    category_code="\033[38;5;110m",
    category_document="\033[38;5;252m",
    category_image="\033[38;5;84m",
    category_archive="\033[38;5;215m",
    category_media="\033[38;5;183m",
    category_data="\033[38;5;153m",
    category_executable="\033[38;5;203m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    window_border="",
    window_title="",
    path_folder="",
    path_current="",
    path_separator="",
    folder_icon="",
    folder_name="",
    folder_selected="",
    file_icon="",
    file_name="",
    file_selected="",
    selection_marker="",
    menu_border="",
    menu_item="",
    menu_shortcut="",
    status_info="",
    status_error="",
    category_code="",
    category_document="",
    category_image="",
    category_archive="",
    category_media="",
    category_data="",
    category_executable="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Names accepted by ``--theme`` and the config file."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Lower-case and validate ``name``; unknown or empty names map to ``default``."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Pick the palette for ``name``; ``no_color`` always wins."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


def category_style(theme: UITheme, category: str) -> str:
    """Return the icon style for a file category, or the plain file-icon style."""
    return {
        "code": theme.category_code,
        "document": theme.category_document,
        "image": theme.category_image,
        "archive": theme.category_archive,
        "audio": theme.category_media,
        "video": theme.category_media,
        "data": theme.category_data,
        "executable": theme.category_executable,
    }.get(category, theme.file_icon)


__all__ = [
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "UITheme",
    "available_theme_names",
    "category_style",
    "normalize_theme_name",
    "resolve_theme",
]
