"""
UI Formatting Utilities

Helper functions for consistent display formatting across Streamlit pages.

Design Principles:
- Pure functions with no side effects
- Use domain enums (Rarity) for business logic
- Return simple types (str, DataFrame, figure) for flexibility
"""

import pandas as pd
import plotly.express as px

from domain.enums import Rarity
from domain.models import GeneratedList

CURRENCY = "gp"


def format_price(price: float, precision: int = 2) -> str:
    """
    Format a price with millify notation and the currency suffix.

    Args:
        price: Price in gold pieces
        precision: Number of decimal places

    Returns:
        Formatted price string (e.g., "1.5k gp", "50 gp")
    """
    from millify import millify

    if price is None:
        return "N/A"
    return f"{millify(price, precision=precision)} {CURRENCY}"


def rarity_badge(rarity: Rarity) -> str:
    """Markdown badge for a rarity, e.g. ':blue-badge[Rare]'."""
    return f":{rarity.display_color}-badge[{rarity.display_name}]"


def format_timestamp(generated: GeneratedList) -> str:
    return generated.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")


def generated_list_to_dataframe(generated: GeneratedList) -> pd.DataFrame:
    """One row per line of a generated list, in generation order."""
    return pd.DataFrame(
        [
            {
                "Item": item.name,
                "Rarity": item.rarity.display_name,
                "Count": item.count,
                "Price": item.price,
                "Value": item.line_value,
            }
            for item in generated.items
        ],
        columns=["Item", "Rarity", "Count", "Price", "Value"],
    )


def create_rarity_chart(generated: GeneratedList):
    """Bar chart of item counts per rarity, or None for an empty list."""
    if not generated.items:
        return None

    counts = {r: 0 for r in Rarity.display_order()}
    for item in generated.items:
        counts[item.rarity] += item.count
    df = pd.DataFrame(
        [{"Rarity": r.display_name, "Count": c} for r, c in counts.items() if c > 0]
    )

    fig = px.bar(
        df,
        x="Rarity",
        y="Count",
        title="Items by Rarity",
        color="Rarity",
        color_discrete_sequence=px.colors.qualitative.Set2,
    )
    fig.update_layout(showlegend=False, height=300)
    return fig
