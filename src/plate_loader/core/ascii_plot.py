"""
ASCII plotting for workout trend series.

Points are placed by session sequence (1, 2, 3, ...) rather than by date,
so irregular gaps between sessions don't squash the chart.
"""

from .trends import TrendMetric, TrendSeries, metric_values
from .units import pretty_weight


def _staircase(grid: list[list[str]], a: tuple[int, int], b: tuple[int, int]) -> None:
    """Connect two grid points with a ╭─╯ style step line (cells left blank only)."""
    height = len(grid)
    width = len(grid[0]) if grid else 0
    col1, row1 = a
    col2, row2 = b

    def put(x: int, r: int, ch: str) -> None:
        if 0 <= x < width and 0 <= r < height and grid[r][x] == " ":
            grid[r][x] = ch

    if row1 == row2:
        for x in range(col1 + 1, col2):
            put(x, row1, "─")
        return
    if col1 == col2:
        for r in range(min(row1, row2) + 1, max(row1, row2)):
            put(col1, r, "│")
        return

    row_dir = -1 if row2 < row1 else 1
    corner_exit = "╯" if row_dir == -1 else "╮"
    corner_entry = "╭" if row_dir == -1 else "╰"
    n_segs = abs(row2 - row1) + 1

    for step in range(n_segs):
        row = row1 + row_dir * step
        pivot_in = col1 + (col2 - col1) * step // n_segs
        pivot_out = col1 + (col2 - col1) * (step + 1) // n_segs
        if step > 0:
            put(pivot_in, row, corner_entry)
        start = col1 + 1 if step == 0 else pivot_in + 1
        end = col2 if step == n_segs - 1 else pivot_out
        for x in range(start, end):
            put(x, row, "─")
        if step < n_segs - 1:
            put(pivot_out, row, corner_exit)


def create_trend_plot(
    series: TrendSeries,
    metric: TrendMetric = TrendMetric.WEIGHT,
    width: int = 60,
    height: int = 16,
) -> str:
    """
    Create an ASCII plot of one series' peak weight or peak reps.

    Args:
        series: Series from build_trend_series()
        metric: Which peak to plot
        width: Plot width in characters
        height: Plot height in lines

    Returns:
        ASCII art string, or a one-line message when there is nothing to plot
    """
    values = metric_values(series, metric)
    if not values:
        if metric == TrendMetric.WEIGHT:
            return f"No weight data for {series.name} yet."
        return f"No sessions logged for {series.name} yet."

    unit = series.weight_unit_label.value if metric == TrendMetric.WEIGHT else "reps"
    y_min = 0.0
    y_max = max(v for _, v in values) * 1.1
    if y_max <= 0:
        y_max = 1.0
    y_range = y_max - y_min

    first_seq = values[0][0]
    seq_range = max(1, values[-1][0] - first_seq)

    label_width = 8
    plot_width = max(10, width - label_width)
    plot_height = max(3, height - 3)
    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    plot_points: list[tuple[int, int, float]] = []
    for seq, value in values:
        x = int(((seq - first_seq) / seq_range) * (plot_width - 1)) if len(values) > 1 else 0
        y = plot_height - 1 - int(((value - y_min) / y_range) * (plot_height - 1))
        plot_points.append((x, y, value))

    for a, b in zip(plot_points, plot_points[1:]):
        _staircase(grid, (a[0], a[1]), (b[0], b[1]))

    for x, y, _ in plot_points:
        grid[y][x] = "●"

    lines = [f"{series.name}: peak {metric.value} ({unit})", "─" * (label_width + plot_width)]
    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * y_range
        lines.append(f"{pretty_weight(round(y_val, 1)):>6} ┤" + "".join(row))
    lines.append("─" * (label_width + plot_width))

    axis = [" "] * plot_width
    for text, pos in ((f"#{first_seq}", 0), (f"#{values[-1][0]}", plot_width - 4)):
        for i, c in enumerate(text):
            if 0 <= pos + i < plot_width:
                axis[pos + i] = c
    lines.append(" " * label_width + "".join(axis))
    return "\n".join(lines)


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max((len(label) for label in labels), default=0)

    lines = []
    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        lines.append(f"{label:>{max_label_len}} │{'█' * bar_len} {pretty_weight(value)}")

    return "\n".join(lines)
