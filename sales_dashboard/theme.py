"""
Theme constants — colors, chart layout, Bootstrap overrides.
Import from here instead of hardcoding colors anywhere.
"""

# ── Color Palette ────────────────────────────────────────────────────────────
GREEN = "#2ecc71"
RED = "#e74c3c"
BLUE = "#4f46e5"
ORANGE = "#f39c12"
PURPLE = "#9b59b6"
TEAL = "#1abc9c"
PINK = "#e91e8f"
WHITE = "#ffffff"
GRAY = "#aaaaaa"
DARKGRAY = "#666666"
CYAN = "#00d4ff"

# ── File category colors (file repository rows) ───────────────────────────
CATEGORY_COLORS = {
    "Sales Report": BLUE,
    "Customer Data": TEAL,
    "Financial Document": ORANGE,
    "Product Material": PURPLE,
    "Other": "#555555",
}

# ── Pie slices ───────────────────────────────────────────────────────────────
PIE_COLORS = [
    "#4F46E5", "#10B981", "#F59E0B", "#EF4444",
    "#8B5CF6", "#EC4899", "#6366F1", "#14B8A6",
    "#F97316", "#DC2626", "#A855F7", "#D946EF",
]

# ── Plotly Chart Layout ──────────────────────────────────────────────────────
CHART_LAYOUT = dict(
    template="plotly_dark",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font={"color": WHITE},
    margin=dict(t=50, b=30, l=60, r=20),
)

# ── Toasts ───────────────────────────────────────────────────────────────────
TOAST_STYLE = {"position": "fixed", "top": 20, "right": 20, "zIndex": 9999}
