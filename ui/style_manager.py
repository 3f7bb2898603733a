"""Style manager: color tokens and stylesheets for the console screen.

Colors follow the system color scheme (light or dark); there is no user
theming. Stylesheets are rendered from small declarative blocks so each
widget style lives in one place.
"""

from typing import Dict, List, Mapping, Sequence, Tuple
from copy import deepcopy

from PyQt6.QtGui import QColor, QPalette

from utils.console_models import LogSeverity


CSSDeclarations = Sequence[Tuple[str, str]]
CSSBlocks = Sequence[Tuple[str, CSSDeclarations]]


_THEME_PRESETS: Dict[str, Dict[str, str]] = {
    'light': {
        'console_background': '#FFFFFF',
        'console_text': '#000000',
        'console_timestamp': '#555555',
        'console_selection': 'rgba(0, 122, 255, 0.18)',
        'header_text': '#000000',
        'accent': '#007AFF',
        'severity_info': '#34C759',
        'severity_warning': '#FF9500',
        'severity_error': '#FF3B30',
        'badge_text': '#FFFFFF',
        'badge_error_bg': '#FF3B30',
        'badge_menu_bg': '#007AFF',
        'toolbar_text': '#007AFF',
        'border': '#D7DCE6',
    },
    'dark': {
        'console_background': '#000000',
        'console_text': '#FFFFFF',
        'console_timestamp': '#8E8E93',
        'console_selection': 'rgba(10, 132, 255, 0.30)',
        'header_text': '#FFFFFF',
        'accent': '#0A84FF',
        'severity_info': '#30D158',
        'severity_warning': '#FF9F0A',
        'severity_error': '#FF453A',
        'badge_text': '#FFFFFF',
        'badge_error_bg': '#FF3B30',
        'badge_menu_bg': '#0A84FF',
        'toolbar_text': '#0A84FF',
        'border': '#2C2C2E',
    },
}


def _render_css(blocks: CSSBlocks, tokens: Mapping[str, str]) -> str:
    """Render declarative CSS blocks, substituting ``{token}`` placeholders."""

    rendered: List[str] = []
    for selector, declarations in blocks:
        lines = [f"{selector} {{"]
        for name, raw_value in declarations:
            value_template = str(raw_value)
            try:
                resolved_value = value_template.format_map(tokens)
            except KeyError:
                resolved_value = value_template
            lines.append(f"    {name}: {resolved_value};")
        lines.append("}")
        rendered.append("\n".join(lines))

    return "\n\n".join(rendered)


def is_dark_palette(palette: QPalette) -> bool:
    """Return True when the palette's window color is dark."""
    return palette.color(QPalette.ColorRole.Window).lightness() < 128


class StyleManager:
    """Central access point for console colors and stylesheets."""

    COLORS: Dict[str, str] = deepcopy(_THEME_PRESETS['light'])
    _theme = 'light'

    _SEVERITY_TOKENS = {
        LogSeverity.INFO: 'severity_info',
        LogSeverity.WARNING: 'severity_warning',
        LogSeverity.ERROR: 'severity_error',
        LogSeverity.DEBUG: 'accent',
    }

    _STATIC_STYLE_BLOCKS: Dict[str, CSSBlocks] = {
        "console": (
            (
                "QListView",
                (
                    ("background-color", "{console_background}"),
                    ("color", "{console_text}"),
                    ("border", "none"),
                    ("selection-background-color", "{console_selection}"),
                    ("selection-color", "{console_text}"),
                ),
            ),
        ),
        "header": (
            (
                "QLabel",
                (
                    ("color", "{header_text}"),
                    ("background-color", "transparent"),
                    ("padding", "0px 4px"),
                ),
            ),
        ),
        "error_badge": (
            (
                "QLabel",
                (
                    ("background-color", "{badge_error_bg}"),
                    ("color", "{badge_text}"),
                    ("font-weight", "600"),
                    ("border-radius", "10px"),
                    ("padding", "12px"),
                ),
            ),
        ),
        "menu_button": (
            (
                "QToolButton",
                (
                    ("background-color", "{badge_menu_bg}"),
                    ("color", "{badge_text}"),
                    ("font-weight", "600"),
                    ("border", "none"),
                    ("border-radius", "10px"),
                    ("padding", "12px"),
                ),
            ),
            (
                "QToolButton::menu-indicator",
                (
                    ("image", "none"),
                ),
            ),
        ),
        "toolbar_button": (
            (
                "QPushButton",
                (
                    ("color", "{toolbar_text}"),
                    ("background-color", "transparent"),
                    ("border", "none"),
                    ("padding", "4px 8px"),
                ),
            ),
            (
                "QPushButton:pressed",
                (
                    ("color", "{console_timestamp}"),
                ),
            ),
        ),
    }

    @classmethod
    def set_theme(cls, theme: str) -> None:
        """Switch between the 'light' and 'dark' token sets."""
        if theme not in _THEME_PRESETS:
            raise ValueError(f"Unknown theme: {theme}")
        cls._theme = theme
        cls.COLORS = deepcopy(_THEME_PRESETS[theme])

    @classmethod
    def sync_with_palette(cls, palette: QPalette) -> str:
        """Pick the theme matching the system palette and return its name."""
        cls.set_theme('dark' if is_dark_palette(palette) else 'light')
        return cls._theme

    @classmethod
    def current_theme(cls) -> str:
        return cls._theme

    @classmethod
    def severity_color(cls, severity: LogSeverity) -> QColor:
        return QColor(cls.COLORS[cls._SEVERITY_TOKENS[severity]])

    @classmethod
    def timestamp_color(cls) -> QColor:
        return QColor(cls.COLORS['console_timestamp'])

    @classmethod
    def message_color(cls) -> QColor:
        return QColor(cls.COLORS['console_text'])

    @classmethod
    def _get_static_style(cls, key: str) -> str:
        blocks = cls._STATIC_STYLE_BLOCKS.get(key)
        if not blocks:
            return ""
        return _render_css(blocks, cls.COLORS)

    @classmethod
    def get_console_style(cls) -> str:
        return cls._get_static_style("console")

    @classmethod
    def get_header_style(cls) -> str:
        return cls._get_static_style("header")

    @classmethod
    def get_error_badge_style(cls) -> str:
        return cls._get_static_style("error_badge")

    @classmethod
    def get_menu_button_style(cls) -> str:
        return cls._get_static_style("menu_button")

    @classmethod
    def get_toolbar_button_style(cls) -> str:
        return cls._get_static_style("toolbar_button")
