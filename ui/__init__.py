"""
UI Package

Presentation layer components for Streamlit pages.
Contains formatting utilities, charts and dialogs.

This package separates UI-specific concerns from business logic,
keeping page files focused on layout and user interaction.
"""

from ui.formatters import (
    format_price,
    format_timestamp,
    rarity_badge,
    generated_list_to_dataframe,
    create_rarity_chart,
)

__all__ = [
    "format_price",
    "format_timestamp",
    "rarity_badge",
    "generated_list_to_dataframe",
    "create_rarity_chart",
]
