"""Qt stylesheets for the admin console."""

from .color_palette import ColorPalette, Theme


class Styles:
    """Stylesheet builders keyed on the active theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        text = ColorPalette.TEXT_PRIMARY.get(theme)
        border = ColorPalette.BORDER_PRIMARY.get(theme)
        return f"""
            QMainWindow, QDialog {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {text};
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {text};
                border: 1px solid {border};
                border-radius: 4px;
                padding: 5px 14px;
            }}
            QPushButton:hover {{ background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)}; }}
            QPushButton#unlockNextButton {{
                background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
                font-weight: bold;
            }}
            QTableWidget {{
                alternate-background-color: {ColorPalette.BACKGROUND_ALTERNATE.get(theme)};
                gridline-color: {border};
            }}
            QTableWidget QLineEdit {{ border: none; padding: 0 4px; }}
            QGroupBox#leaderboardGroup {{
                border: 1px solid {border};
                border-radius: 6px;
                margin-top: 14px;
                font-weight: bold;
            }}
            QGroupBox#leaderboardGroup::title {{ subcontrol-origin: margin; left: 8px; }}
        """

    @staticmethod
    def get_url_label_style() -> str:
        return "font-size: 13pt; font-weight: bold;"

    @staticmethod
    def get_error_label_style(theme: Theme = Theme.LIGHT) -> str:
        return f"color: {ColorPalette.ERROR.get(theme)};"
