"""
Inline SVG artwork for tokens.

The picture is a pure function of (token id, breakdown): the state picks
the palette, glow and gradient; the clock readings are printed on it.
"""

from dataclasses import dataclass

from chronotoken.domain import LocalTimeBreakdown, TimeState

CANVAS_SIZE = 400


@dataclass(frozen=True)
class ArtworkTheme:
    """Visual parameters for one state."""

    sky_top: str
    sky_bottom: str
    body_color: str
    text_color: str
    glow_color: str | None
    glow_radius: int
    star_count: int


ARTWORK_THEMES: dict[TimeState, ArtworkTheme] = {
    TimeState.NIGHT: ArtworkTheme(
        sky_top="#0b1026",
        sky_bottom="#2b1b5a",
        body_color="#f4f1c9",
        text_color="#e0e7ff",
        glow_color="#a5b4fc",
        glow_radius=8,
        star_count=12,
    ),
    TimeState.MORNING: ArtworkTheme(
        sky_top="#fbc2eb",
        sky_bottom="#fda085",
        body_color="#ffb347",
        text_color="#5b2c06",
        glow_color="#ffe0b2",
        glow_radius=4,
        star_count=0,
    ),
    TimeState.DAY: ArtworkTheme(
        sky_top="#4facfe",
        sky_bottom="#a6ffcb",
        body_color="#ffd93b",
        text_color="#0b3d59",
        glow_color=None,
        glow_radius=0,
        star_count=0,
    ),
}


def _stars(token_id: int, count: int, color: str) -> str:
    # Deterministic scatter seeded by the token id; integer LCG only
    parts = []
    seed = token_id * 7919 + 17
    for _ in range(count):
        seed = (seed * 1103515245 + 12345) % 2147483648
        x = 10 + seed % (CANVAS_SIZE - 20)
        seed = (seed * 1103515245 + 12345) % 2147483648
        y = 10 + seed % (CANVAS_SIZE // 2)
        radius = 1 + seed % 2
        parts.append(f'<circle cx="{x}" cy="{y}" r="{radius}" fill="{color}"/>')
    return "".join(parts)


def _celestial_body(state: TimeState, theme: ArtworkTheme) -> str:
    glow_attr = ' filter="url(#glow)"' if theme.glow_color else ""
    if state == TimeState.NIGHT:
        # Crescent moon: a disc with a sky-colored disc bitten out of it
        return (
            f'<circle cx="290" cy="110" r="48" fill="{theme.body_color}"{glow_attr}/>'
            f'<circle cx="312" cy="96" r="44" fill="{theme.sky_top}"/>'
        )
    if state == TimeState.MORNING:
        return f'<circle cx="200" cy="260" r="70" fill="{theme.body_color}"{glow_attr}/>'
    return f'<circle cx="200" cy="120" r="60" fill="{theme.body_color}"{glow_attr}/>'


def render_artwork(token_id: int, breakdown: LocalTimeBreakdown) -> str:
    """
    Render the SVG document for a token at the given instant.

    Args:
        token_id: Token the picture belongs to
        breakdown: Classifier output selecting the theme

    Returns:
        SVG markup as a single line
    """
    state = breakdown.state
    theme = ARTWORK_THEMES[state]

    defs = [
        '<linearGradient id="sky" x1="0" y1="0" x2="0" y2="1">'
        f'<stop offset="0%" stop-color="{theme.sky_top}"/>'
        f'<stop offset="100%" stop-color="{theme.sky_bottom}"/>'
        "</linearGradient>"
    ]
    if theme.glow_color:
        defs.append(
            '<filter id="glow" x="-50%" y="-50%" width="200%" height="200%">'
            f'<feDropShadow dx="0" dy="0" stdDeviation="{theme.glow_radius}" '
            f'flood-color="{theme.glow_color}"/>'
            "</filter>"
        )

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{CANVAS_SIZE}" '
        f'height="{CANVAS_SIZE}" viewBox="0 0 {CANVAS_SIZE} {CANVAS_SIZE}">'
        f"<defs>{''.join(defs)}</defs>"
        f'<rect width="{CANVAS_SIZE}" height="{CANVAS_SIZE}" fill="url(#sky)"/>'
        f"{_stars(token_id, theme.star_count, theme.body_color)}"
        f"{_celestial_body(state, theme)}"
        f'<text x="200" y="340" font-family="monospace" font-size="28" '
        f'text-anchor="middle" fill="{theme.text_color}">{breakdown.local_time}</text>'
        f'<text x="200" y="372" font-family="monospace" font-size="16" '
        f'text-anchor="middle" fill="{theme.text_color}">'
        f"#{token_id} {state.label} {breakdown.offset_label}</text>"
        "</svg>"
    )
