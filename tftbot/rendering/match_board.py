"""
Match board renderer.

Draws up to ten of the player's final-board units with their star level.
"""

import io
from typing import Dict, List

from PIL import Image, ImageDraw, ImageFont

from tftbot.constants import AssetConstants
from tftbot.data_models.riot import MatchParticipant, UnitRecord

WIDTH, HEIGHT = 700, 400
UNIT_SIZE = (130, 140)
STAR_SIZE = 20
MAX_UNITS = 10
POSITIONS = [
    (5, 105), (145, 105), (285, 105), (425, 105), (565, 105),
    (5, 255), (145, 255), (285, 255), (425, 255), (565, 255),
]


def champion_url(unit: UnitRecord) -> str:
    return AssetConstants.CHAMPION_SQUARE_URL.format(champion=unit.character_id.lower())


def board_image_urls(participant: MatchParticipant) -> List[str]:
    """Every remote image the board may draw."""
    urls = [AssetConstants.BACKGROUND_URL]
    urls.extend(AssetConstants.STAR_URLS.values())
    urls.extend(champion_url(unit) for unit in participant.units[:MAX_UNITS])
    return urls


def _unit_label(unit: UnitRecord) -> List[str]:
    name = unit.character_id.partition('_')[2] or unit.character_id
    words = name.replace('_', ' ').split()
    return words[:2] if len(words) > 1 else [name[:12]]


def render_match_board(participant: MatchParticipant, images: Dict[str, Image.Image]) -> bytes:
    """
    Render a participant's final board to PNG bytes.

    Args:
        participant: The player's line in the match
        images: Pre-loaded images keyed by URL; missing champions get a text placeholder
    """
    canvas = Image.new('RGBA', (WIDTH, HEIGHT), '#1a1a1a')
    background = images.get(AssetConstants.BACKGROUND_URL)
    if background is not None:
        canvas.paste(background.resize((WIDTH, HEIGHT)), (0, 0))
    draw = ImageDraw.Draw(canvas)
    font = ImageFont.load_default(size=14)
    star_font = ImageFont.load_default(size=16)

    for (x, y), unit in zip(POSITIONS, participant.units[:MAX_UNITS]):
        box = (x, y, x + UNIT_SIZE[0], y + UNIT_SIZE[1])
        champion = images.get(champion_url(unit))
        if champion is not None:
            canvas.paste(champion.resize(UNIT_SIZE), (x, y), champion.resize(UNIT_SIZE))
        else:
            draw.rectangle(box, fill='#2a2a2a')
            lines = _unit_label(unit)
            for i, line in enumerate(lines):
                offset = (i - (len(lines) - 1) / 2) * 20
                draw.text((x + UNIT_SIZE[0] / 2, y + 70 + offset), line, fill='white', font=font, anchor='mm')
        draw.rectangle(box, outline='white', width=2)

        if unit.tier < 2:
            continue
        star = images.get(AssetConstants.STAR_URLS.get(unit.tier, ''))
        if star is not None:
            start_x = x + (UNIT_SIZE[0] - unit.tier * STAR_SIZE) // 2
            resized = star.resize((STAR_SIZE, STAR_SIZE))
            for s in range(unit.tier):
                canvas.paste(resized, (start_x + s * STAR_SIZE, y + 115), resized)
        else:
            draw.text((x + UNIT_SIZE[0] / 2, y + 125), '★' * unit.tier, fill='#FFD700',
                      font=star_font, anchor='mm')

    buffer = io.BytesIO()
    canvas.convert('RGB').save(buffer, 'PNG', optimize=True)
    return buffer.getvalue()
