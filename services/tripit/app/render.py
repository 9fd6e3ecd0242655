"""SVG rendering of the trip map."""

from __future__ import annotations

import svgwrite
from svgwrite.container import Group

from .geodata import Geography
from .geometry import Point
from .layout import PlacedStop, TripLayout
from .progress import percentage

OCEAN = "#B0D9EC"
LAND_BLUR = "#D6E8C8"
COAST = "#8CB878"
ROAD = "#C4A87C"
REACHED = "#DAA520"
GOLD = "#FFD700"
GREY = "#B0B0B0"

MOUNTAIN_SHAPES = (
    ([(0, -40), (-35, 20), (35, 20)], {"fill": "#8B9DC3", "stroke": "#5B6F8E", "stroke_width": 2}),
    ([(0, -40), (-12, -10), (12, -10)], {"fill": "white", "stroke": "#B0BFD4", "stroke_width": 1}),
    ([(25, -15), (5, 20), (45, 20)], {"fill": "#9BADC4", "stroke": "#5B6F8E", "stroke_width": 1.5}),
    ([(25, -15), (18, -2), (32, -2)], {"fill": "white"}),
)
GOAL_STAR = [
    (0, -22), (6, -8), (20, -8), (9, 2), (13, 18),
    (0, 10), (-13, 18), (-9, 2), (-20, -8), (-6, -8),
]


def _at(x: float, y: float, scale: float = 1.0) -> str:
    if scale == 1:
        return f"translate({x:.2f},{y:.2f})"
    return f"translate({x:.2f},{y:.2f}) scale({scale})"


def _defs(dwg: svgwrite.Drawing, height: int) -> None:
    land = dwg.linearGradient(
        start=(0, 0), end=(0, height), id="landGrad", gradientUnits="userSpaceOnUse"
    )
    land.add_stop_color("0%", "#D4E7C5")
    land.add_stop_color("40%", "#E2EED5")
    land.add_stop_color("100%", "#EDE8D0")
    dwg.defs.add(land)

    road = dwg.linearGradient(start=(0, 0), end=(0, 1), id="roadReached")
    road.add_stop_color("0%", "#34D399")
    road.add_stop_color("100%", "#10B981")
    dwg.defs.add(road)

    blur = dwg.filter(id="landBlur", x="-3%", y="-3%", width="106%", height="106%")
    blur.feGaussianBlur(in_="SourceGraphic", stdDeviation=5)
    dwg.defs.add(blur)


def _geography(dwg: svgwrite.Drawing, geo: Geography) -> Group:
    g = dwg.g(id="geography")
    g.add(dwg.rect(insert=(0, 0), size=(geo.surface.width, geo.surface.height), fill=OCEAN))
    for shape in geo.land:
        d = shape.path.d
        if shape.coast:
            g.add(dwg.path(d=d, fill=LAND_BLUR, filter="url(#landBlur)"))
        g.add(dwg.path(d=d, fill="url(#landGrad)"))
    for shape in geo.land:
        if shape.coast:
            g.add(dwg.path(d=shape.path.d, fill="none", stroke=COAST, stroke_width=1, opacity=0.4))
    for d in geo.waves:
        g.add(dwg.path(d=d, fill="none", stroke="#7CBAD4", stroke_width=1.2, opacity=0.35))
    for label in geo.sea_labels:
        x, y = label.position
        extra = {"transform": f"rotate({label.rotate},{x:.2f},{y:.2f})"} if label.rotate else {}
        g.add(dwg.text(
            label.text, insert=(x, y), font_size=label.font_size, fill="#4A8BA8",
            font_style="italic", opacity=0.55, text_anchor="middle", **extra,
        ))
    for border in geo.border_paths():
        d = border.d
        g.add(dwg.path(
            d=d, fill="none", stroke="#A0B0A0", stroke_width=3, opacity=0.12,
            stroke_linecap="round", stroke_linejoin="round",
        ))
        g.add(dwg.path(
            d=d, fill="none", stroke="#7A8A7A", stroke_width=1.2, opacity=0.35,
            stroke_linecap="round", stroke_linejoin="round", stroke_dasharray="8,5",
        ))
    return g


def _decorations(dwg: svgwrite.Drawing, geo: Geography) -> Group:
    g = dwg.g(id="decorations")
    for mountain in geo.mountains:
        x, y = mountain.position
        m = dwg.g(transform=_at(x, y, mountain.scale))
        for points, style in MOUNTAIN_SHAPES:
            m.add(dwg.polygon(points=points, stroke_linejoin="round", **style))
        if mountain.label:
            m.add(dwg.text(
                mountain.label, insert=(0, 35), text_anchor="middle", font_size=11,
                fill="#5B6F8E", font_weight="bold", font_style="italic",
            ))
        g.add(m)
    for tree in geo.trees:
        x, y = tree.position
        t = dwg.g(transform=_at(x, y, tree.scale))
        t.add(dwg.rect(insert=(-3, 5), size=(6, 12), fill="#8B6914", rx=1))
        t.add(dwg.polygon(points=[(0, -15), (-12, 5), (12, 5)], fill="#2D8B46", stroke="#1A6B30", stroke_width=1))
        t.add(dwg.polygon(points=[(0, -22), (-9, -3), (9, -3)], fill="#3DA55D", stroke="#2D8B46", stroke_width=1))
        g.add(t)
    for cloud in geo.clouds:
        c = dwg.g(transform=_at(cloud.x, cloud.y, cloud.scale), opacity=0.5)
        c.add(dwg.ellipse(center=(0, 0), r=(30, 12), fill="white"))
        c.add(dwg.ellipse(center=(-15, -5), r=(18, 10), fill="white"))
        c.add(dwg.ellipse(center=(15, -3), r=(20, 11), fill="white"))
        g.add(c)
    for label in geo.country_labels:
        x, y = label.position
        g.add(dwg.text(
            label.text, insert=(x, y), font_size=label.font_size, font_weight="bold",
            font_style="italic", text_anchor="middle", stroke="white", stroke_width=3,
            paint_order="stroke", fill="#4A6A4A", opacity=0.7,
        ))
    return g


def _road(dwg: svgwrite.Drawing, layout: TripLayout) -> Group:
    g = dwg.g(id="road")
    road = layout.road.d if len(layout.road.segments) > 1 else ""
    round_ends = {"stroke_linecap": "round", "stroke_linejoin": "round"}
    if road:
        g.add(dwg.path(d=road, fill="none", stroke="rgba(0,0,0,0.1)", stroke_width=14, **round_ends))
    if layout.lead_in is not None:
        lead = layout.lead_in.d
        g.add(dwg.path(d=lead, fill="none", stroke=ROAD, stroke_width=8, stroke_linecap="round"))
        g.add(dwg.path(d=lead, fill="none", stroke="white", stroke_width=2, stroke_dasharray="8,8", opacity=0.6))
    if road:
        g.add(dwg.path(d=road, id="roadPath", fill="none", stroke=ROAD, stroke_width=10, **round_ends))
        g.add(dwg.path(d=road, fill="none", stroke="white", stroke_width=2, stroke_dasharray="8,8", opacity=0.5))
        if layout.progress.fraction > 0 and layout.road_length > 0:
            covered = layout.progress.fraction * layout.road_length
            g.add(dwg.path(
                d=road, id="roadReachedPath", fill="none", stroke="url(#roadReached)",
                stroke_width=10, stroke_dasharray=f"{covered:.2f},{layout.road_length:.2f}",
                opacity=0.8, **round_ends,
            ))
    return g


def _start_marker(dwg: svgwrite.Drawing, name: str, at: Point) -> Group:
    g = dwg.g(transform=_at(*at), class_="start")
    g.add(dwg.polygon(points=[(0, -18), (-14, 0), (14, 0)], fill="#FF6B6B", stroke="#CC5555", stroke_width=1.5))
    g.add(dwg.rect(insert=(-10, 0), size=(20, 16), fill="#FFAA80", stroke="#CC8866", stroke_width=1.5, rx=2))
    g.add(dwg.rect(insert=(-4, 6), size=(8, 10), fill="#8B6914", rx=1))
    g.add(dwg.text(name, insert=(0, 32), text_anchor="middle", font_size=12, font_weight="bold", fill="#CC5555"))
    return g


def _stop_marker(dwg: svgwrite.Drawing, stop: PlacedStop, is_goal: bool) -> Group:
    text_color = "#333" if stop.reached else "#888"
    edge = REACHED if stop.reached else "#999"
    if is_goal:
        g = dwg.g(transform=_at(*stop.position), class_="goal")
        g.add(dwg.polygon(
            points=GOAL_STAR, fill=GOLD if stop.reached else "#D4D4D4",
            stroke=edge, stroke_width=2,
        ))
        g.add(dwg.text(f"{stop.name} ⭐", insert=(0, 35), text_anchor="middle", font_size=14, font_weight="bold", fill=text_color))
        if stop.description:
            g.add(dwg.text(stop.description, insert=(0, 48), text_anchor="middle", font_size=9, fill="#666"))
        return g

    color = GOLD if stop.reached else GREY
    g = dwg.g(transform=_at(*stop.position), class_="milestone")
    g.add(dwg.line(start=(0, -20), end=(0, 10), stroke=edge, stroke_width=2.5))
    g.add(dwg.polygon(points=[(0, -20), (18, -14), (0, -8)], fill=color, stroke=edge, stroke_width=1.5))
    g.add(dwg.circle(center=(0, 10), r=4, fill=color, stroke=edge, stroke_width=1.5))
    g.add(dwg.text(stop.name, insert=(22, -10), font_size=11, font_weight="bold", fill=text_color))
    if stop.description:
        g.add(dwg.text(stop.description, insert=(22, 2), font_size=9, fill="#888"))
    return g


def _bus(dwg: svgwrite.Drawing, at: Point) -> Group:
    g = dwg.g(transform=_at(at.x - 15, at.y - 10), id="bus")
    g.add(dwg.rect(insert=(0, 0), size=(30, 18), rx=5, fill="#FF6B6B", stroke="#CC4444", stroke_width=1.5))
    for wx in (4, 15):
        g.add(dwg.rect(insert=(wx, 3), size=(8, 7), rx=2, fill="#87CEEB", stroke="#5BA3C9", stroke_width=1))
    for cx in (7, 23):
        g.add(dwg.circle(center=(cx, 20), r=3.5, fill="#333", stroke="#555", stroke_width=1))
        g.add(dwg.circle(center=(cx, 20), r=1.5, fill="#999"))
    return g


def _kr(value: float) -> str:
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def _header(dwg: svgwrite.Drawing, layout: TripLayout, current_amount: float) -> Group:
    g = dwg.g(id="header", transform=_at(12, 12))
    g.add(dwg.rect(insert=(0, 0), size=(280, 66), rx=12, fill="white", opacity=0.85))
    g.add(dwg.text("🚌 Tripit", insert=(14, 24), font_size=18, font_weight="bold", fill="#0D9488"))
    route = " & ".join(name for name, _ in layout.starts)
    g.add(dwg.text(f"From {route} to {layout.goal_city}", insert=(14, 42), font_size=11, fill="#6B7280"))
    pct = percentage(current_amount, layout.total_cost)
    g.add(dwg.text(
        f"{_kr(current_amount)} / {_kr(layout.total_cost)} kr ({pct}%)",
        insert=(14, 57), font_size=11, font_weight="bold", fill="#374151", id="funding",
    ))
    return g


def render_map(layout: TripLayout, geography: Geography, current_amount: float) -> str:
    """Return the full SVG document for a planned trip."""

    width, height = geography.surface.width, geography.surface.height
    dwg = svgwrite.Drawing(size=("100%", "100%"), profile="full", debug=False)
    dwg.viewbox(0, 0, width, height)
    _defs(dwg, height)
    dwg.add(_geography(dwg, geography))
    dwg.add(_decorations(dwg, geography))
    dwg.add(_road(dwg, layout))

    for name, at in layout.starts:
        dwg.add(_start_marker(dwg, name, at))
    flags = layout.goal_stops
    for i, stop in enumerate(flags):
        dwg.add(_stop_marker(dwg, stop, is_goal=i == len(flags) - 1))

    if current_amount > 0 and layout.progress.fraction > 0:
        dwg.add(_bus(dwg, layout.progress.marker))
    dwg.add(_header(dwg, layout, current_amount))
    return dwg.tostring()
