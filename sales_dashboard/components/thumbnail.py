"""Avatar thumbnail component."""
from dash import html
from sales_dashboard.theme import DARKGRAY


def avatar(image_url="", initials="?", size=80):
    """Return a round avatar img element or gray placeholder."""
    if image_url:
        return html.Img(
            src=image_url, referrerPolicy="no-referrer",
            style={"width": f"{size}px", "height": f"{size}px", "objectFit": "cover",
                   "borderRadius": "50%", "verticalAlign": "middle"})
    return html.Div(
        initials, style={
            "width": f"{size}px", "height": f"{size}px", "display": "inline-flex",
            "alignItems": "center", "justifyContent": "center",
            "backgroundColor": "#ffffff10", "borderRadius": "50%",
            "color": DARKGRAY, "fontSize": f"{size // 3}px", "fontWeight": "bold",
            "verticalAlign": "middle"})


def initials_for(name, email=""):
    source = (name or email or "?").strip()
    parts = [p for p in source.replace("@", " ").split() if p]
    if not parts:
        return "?"
    return "".join(p[0] for p in parts[:2]).upper()
