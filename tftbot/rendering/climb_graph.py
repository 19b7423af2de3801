"""
Climb graph renderer.

Draws the reconstructed LP timeline as a line chart with placement-colored
points, rank labels on the y axis and the most frequent duo partner in the
legend. Pure function of its inputs; all images are downloaded beforehand.
"""

import io
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from tftbot.config import Config
from tftbot.constants import AssetConstants, PlacementConstants
from tftbot.data_models.climb import ClimbReport, PartnerAggregate
from tftbot.utils.rank import from_total, short_label

WIDTH, HEIGHT = 1600, 900
PADDING = {'top': 80, 'right': 250, 'bottom': 100, 'left': 100}
GRID_LINES = 8
MAX_X_LABELS = 10
LINE_COLOR = '#00D4FF'
GOLD = '#FFD700'
GRID_COLOR = (255, 255, 255, 26)
PARTNER_ICON_EVERY = 3


def profile_icon_url(icon_id: Optional[int]) -> Optional[str]:
    if icon_id is None:
        return None
    return AssetConstants.PROFILE_ICON_URL.format(version=Config.DDRAGON_VERSION, icon_id=icon_id)


def climb_image_urls(report: ClimbReport) -> List[str]:
    """Every remote image the graph may draw."""
    urls = [AssetConstants.BACKGROUND_URL]
    urls.extend(profile_icon_url(p.icon_ref) for p in report.partners if p.icon_ref is not None)
    return urls


def _font(size: int) -> ImageFont.ImageFont:
    return ImageFont.load_default(size=size)


def _paste_circle(canvas: Image.Image, icon: Image.Image, center: Tuple[int, int], size: int):
    icon = icon.resize((size, size))
    mask = Image.new('L', (size, size), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, size, size), fill=255)
    canvas.paste(icon, (center[0] - size // 2, center[1] - size // 2), mask)


def _dot(draw: ImageDraw.ImageDraw, center: Tuple[float, float], radius: float, fill):
    x, y = center
    draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=fill)


def render_climb_graph(report: ClimbReport, images: Dict[str, Image.Image]) -> bytes:
    """
    Render the climb graph to PNG bytes.

    Args:
        report: Reconstructed climb
        images: Pre-loaded images keyed by URL; missing ones are skipped
    """
    canvas = Image.new('RGBA', (WIDTH, HEIGHT), '#1a1a1a')
    background = images.get(AssetConstants.BACKGROUND_URL)
    if background is not None:
        canvas.paste(background.resize((WIDTH, HEIGHT)), (0, 0))
        canvas = Image.alpha_composite(canvas, Image.new('RGBA', (WIDTH, HEIGHT), (0, 0, 0, 178)))

    overlay = Image.new('RGBA', (WIDTH, HEIGHT), (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    graph_width = WIDTH - PADDING['left'] - PADDING['right']
    graph_height = HEIGHT - PADDING['top'] - PADDING['bottom']

    lp_values = [point.total_lp for point in report.timeline]
    min_lp, max_lp = min(lp_values), max(lp_values)
    lp_range = (max_lp - min_lp) or 100
    display_min = min_lp - lp_range * 0.1
    display_max = max_lp + lp_range * 0.1
    display_range = display_max - display_min

    def x_for(index: int) -> float:
        return PADDING['left'] + graph_width / max(len(report.timeline) - 1, 1) * index

    def y_for(total_lp: float) -> float:
        return PADDING['top'] + graph_height - (total_lp - display_min) / display_range * graph_height

    # Grid and rank labels
    label_font = _font(14)
    for i in range(GRID_LINES + 1):
        y = PADDING['top'] + graph_height / GRID_LINES * i
        value = display_max - display_range / GRID_LINES * i
        draw.line((PADDING['left'], y, PADDING['left'] + graph_width, y), fill=GRID_COLOR, width=1)
        draw.text((PADDING['left'] - 10, y), short_label(from_total(round(value))),
                  fill='white', font=label_font, anchor='rm')

    # Game numbers
    label_count = min(MAX_X_LABELS, len(report.timeline))
    for i in range(label_count):
        fraction = i / max(label_count - 1, 1)
        x = PADDING['left'] + graph_width * fraction
        game_number = round((len(report.timeline) - 1) * fraction)
        draw.text((x, HEIGHT - PADDING['bottom'] + 30), f"Game {game_number}",
                  fill='white', font=label_font, anchor='mm')

    points = [(x_for(i), y_for(p.total_lp)) for i, p in enumerate(report.timeline)]
    if len(points) > 1:
        draw.line(points, fill=LINE_COLOR, width=3, joint='curve')

    for (x, y), point in zip(points, report.timeline):
        color = PlacementConstants.TEAM_PLACEMENT_COLORS.get(point.placement, LINE_COLOR)
        _dot(draw, (x, y), 5, color)

    canvas = Image.alpha_composite(canvas, overlay)
    draw = ImageDraw.Draw(canvas)

    # Partner icons above every third game
    partners_by_id = {p.partner_id: p for p in report.partners}
    for index, ((x, y), point) in enumerate(zip(points, report.timeline)):
        if index == 0 or index % PARTNER_ICON_EVERY or not point.partner_id:
            continue
        partner = partners_by_id.get(point.partner_id)
        icon = images.get(profile_icon_url(partner.icon_ref)) if partner else None
        if icon is not None:
            _paste_circle(canvas, icon, (int(x), int(y) - 30), 30)
            draw.ellipse((x - 15, y - 45, x + 15, y - 15), outline=GOLD, width=2)

    draw.text((WIDTH / 2, 45), 'Double Up Ranked Climb', fill='white', font=_font(32), anchor='mm')

    _draw_legend(canvas, draw, report.partners[0] if report.partners else None, images)

    change = report.summary.net_lp
    arrow = '▲' if change >= 0 else '▼'
    draw.text((WIDTH / 2, HEIGHT - 35), f"{arrow} {abs(change)} LP",
              fill='#00FF00' if change >= 0 else '#FF0000', font=_font(24), anchor='mm')

    buffer = io.BytesIO()
    canvas.convert('RGB').save(buffer, 'PNG', optimize=True)
    return buffer.getvalue()


def _draw_legend(canvas: Image.Image, draw: ImageDraw.ImageDraw,
                 top_partner: Optional[PartnerAggregate], images: Dict[str, Image.Image]):
    legend_x = WIDTH - PADDING['right'] + 30
    legend_y = PADDING['top']
    font = _font(18)

    draw.text((legend_x, legend_y), 'Placement:', fill='white', font=font, anchor='lm')
    legend_y += 35
    for placement, color in PlacementConstants.TEAM_PLACEMENT_COLORS.items():
        _dot(draw, (legend_x + 10, legend_y), 6, color)
        suffix = PlacementConstants.PLACEMENT_SUFFIX[placement]
        draw.text((legend_x + 25, legend_y), f"{placement}{suffix} Place", fill='white', font=font, anchor='lm')
        legend_y += 35

    legend_y += 20
    draw.text((legend_x, legend_y), 'Duo Partner', fill='white', font=_font(20), anchor='lm')
    legend_y += 60

    if top_partner is None:
        draw.text((legend_x, legend_y), 'None', fill='white', font=_font(14), anchor='lm')
        return

    icon_x, icon_size = legend_x + 75, 50
    icon = images.get(profile_icon_url(top_partner.icon_ref))
    if icon is not None:
        _paste_circle(canvas, icon, (icon_x, legend_y), icon_size)
    draw.ellipse((icon_x - icon_size / 2, legend_y - icon_size / 2,
                  icon_x + icon_size / 2, legend_y + icon_size / 2), outline=GOLD, width=3)

    name = top_partner.label.split('#')[0]
    draw.text((icon_x, legend_y + icon_size / 2 + 20), name, fill='white', font=_font(14), anchor='mm')
    draw.text((icon_x, legend_y + icon_size / 2 + 35), f"{top_partner.game_count} games",
              fill=GOLD, font=_font(12), anchor='mm')
