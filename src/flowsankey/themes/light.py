"""Light theme."""

from flowsankey.render.style import Theme

LIGHT_THEME = Theme(
    name="light",
    background_color="none",
    node_colors=[
        "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
        "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
    ],
    node_stroke="#333333",
    label_color="#333333",
    label_font_size=12.0,
    title_color="#111111",
    title_font_size=22.0,
)
