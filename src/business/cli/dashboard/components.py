"""Terminal UI components.

Provides helper functions for rendering portfolio output:
- Signed percent and money formatting
- Change icons
- Boxes and tables
"""

from typing import Optional


def change_icon(value: Optional[float]) -> str:
    """Return emoji icon for a signed change.

    Returns:
        📈 for positive, 📉 for negative, ➖ for zero or unknown
    """
    if value is None or value == 0:
        return "➖"
    return "📈" if value > 0 else "📉"


def format_pct(value: Optional[float], decimals: int = 2, signed: bool = True) -> str:
    """Format a value already expressed in percent points.

    Example:
        >>> format_pct(-6.25)
        '-6.25%'
        >>> format_pct(3.1)
        '+3.10%'
    """
    if value is None:
        return "-"
    sign = "+" if signed and value > 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_money(value: Optional[float], currency: Optional[str] = None, decimals: int = 2) -> str:
    """Format a money amount with an optional currency code suffix."""
    if value is None:
        return "-"
    text = f"{value:,.{decimals}f}"
    return f"{text} {currency}" if currency else text


def box_title(title: str, width: int = 40) -> str:
    """Create a box title line like "┌─── Title ───────────┐"."""
    padding = width - len(title) - 6  # 6 = "┌─── " + " ─┐"
    if padding < 2:
        padding = 2
    return f"┌─── {title} {'─' * padding}┐"


def box_line(content: str, width: int = 40) -> str:
    """Create a box content line like "│ content            │"."""
    padding = width - len(content) - 4  # 4 = "│ " + " │"
    if padding < 0:
        content = content[:width - 4]
        padding = 0
    return f"│ {content}{' ' * padding} │"


def box_bottom(width: int = 40) -> str:
    return f"└{'─' * (width - 2)}┘"


def table_header(columns: list[tuple[str, int]], separator: str = "│") -> str:
    """Create a table header line.

    Args:
        columns: List of (name, width) tuples
        separator: Column separator character
    """
    parts = [f"{name:^{width}}" for name, width in columns]
    return f"{separator}{separator.join(parts)}{separator}"


def table_separator(columns: list[tuple[str, int]], char: str = "─") -> str:
    parts = [char * width for _, width in columns]
    return f"┼{'┼'.join(parts)}┼"


def table_row(values: list[str], columns: list[tuple[str, int]], separator: str = "│") -> str:
    """Create a table data row.

    Numbers are right-aligned, text is left-aligned. Values longer than the
    column are truncated.
    """
    parts = []
    for i, (_, width) in enumerate(columns):
        val = values[i] if i < len(values) else ""
        val = val[:width]
        if val.lstrip("+-").replace(".", "").replace(",", "").replace("%", "").isdigit():
            parts.append(f"{val:>{width}}")
        else:
            parts.append(f"{val:<{width}}")
    return f"{separator}{separator.join(parts)}{separator}"
