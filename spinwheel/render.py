import math

import numpy as np
import plotly.graph_objects as go

from .config import Color, WheelConfig

# =========================
# DRAWING CONSTANTS
# =========================
ARC_SEGMENTS = 16              # chords per sector outline
EDGE_COLOR = Color(0, 0, 0)
EDGE_WIDTH = 4
POINTER_OFFSET = 24            # gap between the window top and the pointer base
POINTER_HALF_WIDTH = 20
POINTER_LENGTH = 32
WHEEL_MARGIN = 32
LABEL_RADIUS = 0.55            # label centre, as a fraction of the radius
BASE_FONT_SIZE = 24
BACKGROUND = Color(26, 26, 26)


class WheelPainter:
    """
    What paint_wheel needs from a drawing backend. Angles are radians in
    screen coordinates (y grows downwards), so positive angles turn clockwise.
    """

    def draw_arc_sector(self, center, radius, angle_start, angle_end, color):
        raise NotImplementedError

    def draw_label(self, text, position, rotation, color):
        raise NotImplementedError

    def draw_pointer(self, tip, half_width, length):
        raise NotImplementedError


def label_color(color: Color) -> Color:
    """White text on dark sectors, black on light ones."""
    if (color.r + color.g + color.b) / (3 * 255) < 0.5:
        return Color(255, 255, 255)
    return Color(0, 0, 0)


def wheel_radius(width: float, height: float) -> float:
    return min(width, height) / 2.0 - WHEEL_MARGIN


def paint_wheel(painter: WheelPainter, config: WheelConfig, angle: float, center, radius: float):
    n = len(config.choices)
    arclen = 2.0 * math.pi / n
    cx, cy = center

    # ---- Sectors ----
    for i, choice in enumerate(config.choices):
        color = config.sector_color(i)
        angle1 = angle + i * arclen - math.pi / 2.0
        angle2 = angle1 + arclen
        painter.draw_arc_sector(center, radius, angle1, angle2, color)

        mid = angle1 + arclen / 2.0
        position = (cx + LABEL_RADIUS * radius * math.cos(mid), cy + LABEL_RADIUS * radius * math.sin(mid))
        painter.draw_label(choice.name, position, mid, label_color(color))

    # ---- Pointer (top, pointing down at the wheel) ----
    tip = (cx, POINTER_OFFSET + POINTER_LENGTH)
    painter.draw_pointer(tip, POINTER_HALF_WIDTH, POINTER_LENGTH)


class PlotlyPainter(WheelPainter):
    """Draws onto a plotly figure laid out in pixel coordinates."""

    def __init__(self, width: int, height: int, font_family=None):
        self.width = width
        self.height = height
        self.font_family = font_family
        self.fig = go.Figure()
        self.fig.update_layout(
            width=width,
            height=height,
            margin=dict(l=0, r=0, t=0, b=0),
            showlegend=False,
            plot_bgcolor=BACKGROUND.css(),
            paper_bgcolor=BACKGROUND.css(),
        )
        self.fig.update_xaxes(range=[0, width], visible=False, fixedrange=True)
        # reversed y axis: same orientation as screen pixels
        self.fig.update_yaxes(range=[height, 0], visible=False, fixedrange=True,
                              scaleanchor="x", scaleratio=1)

    def draw_arc_sector(self, center, radius, angle_start, angle_end, color):
        cx, cy = center
        thetas = np.linspace(angle_start, angle_end, ARC_SEGMENTS + 1)
        xs = cx + radius * np.cos(thetas)
        ys = cy + radius * np.sin(thetas)
        path = f"M {cx:.2f} {cy:.2f} " + " ".join(f"L {x:.2f} {y:.2f}" for x, y in zip(xs, ys)) + " Z"
        self.fig.add_shape(
            type="path",
            xref="x", yref="y",
            path=path,
            fillcolor=color.css(),
            line=dict(color=EDGE_COLOR.css(), width=EDGE_WIDTH),
            layer="below",
        )

    def draw_label(self, text, position, rotation, color):
        x, y = position
        self.fig.add_annotation(
            x=x, y=y,
            xref="x", yref="y",
            text=text,
            showarrow=False,
            # plotly's textangle is clockwise degrees, like our screen angles
            textangle=math.degrees(rotation),
            font=dict(
                size=max(1.0, BASE_FONT_SIZE * wheel_radius(self.width, self.height) / 400.0),
                color=color.css(),
                family=self.font_family,
            ),
        )

    def draw_pointer(self, tip, half_width, length):
        x, y = tip
        base = y - length
        self.fig.add_shape(
            type="path",
            xref="x", yref="y",
            path=f"M {x - half_width} {base} L {x + half_width} {base} L {x} {y} Z",
            line=dict(color="black", width=EDGE_WIDTH),
            fillcolor="white",
            layer="above",
        )


def wheel_fig(config: WheelConfig, angle: float = 0.0, width: int = 800, height: int = 800,
              font_family=None) -> go.Figure:
    painter = PlotlyPainter(width, height, font_family)
    paint_wheel(painter, config, angle, (width / 2.0, height / 2.0), wheel_radius(width, height))
    return painter.fig
