"""Dark grey theme."""

from flowsankey.render.style import Theme

DARK_THEME = Theme(
    name="dark",
    background_color="#2b2b2b",
    node_colors=[
        "#4e79a7", "#f28e2b", "#e15759", "#76b7b2", "#59a14f",
        "#edc948", "#b07aa1", "#ff9da7", "#9c755f", "#bab0ac",
    ],
    node_stroke="#ffffff",
    node_stroke_width=0.75,
    link_opacity=0.5,
    label_color="#e0e0e0",
    label_font_size=12.0,
    title_color="#ffffff",
    title_font_size=22.0,
)
