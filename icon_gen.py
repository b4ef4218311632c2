"""Generate the system-tray icon (64×64 PIL Image, in-memory)."""

from datetime import date

from PIL import Image, ImageDraw, ImageFont

_BAND = "#CC0000"


def _fit_font(draw: ImageDraw.ImageDraw, text: str, max_w: int, max_h: int):
    """Return the largest TrueType font for *text* inside the box, or the default."""
    font_size = 80
    while font_size > 8:
        try:
            font = ImageFont.truetype("segoeuib.ttf", font_size)
        except OSError:
            return ImageFont.load_default()
        bbox = draw.textbbox((0, 0), text, font=font)
        if bbox[2] - bbox[0] <= max_w and bbox[3] - bbox[1] <= max_h:
            return font
        font_size -= 1
    return ImageFont.load_default()


def create_icon_image(today: date | None = None) -> Image.Image:
    """Return a 64×64 RGBA calendar page: red top band, day of month below."""
    size = 64
    band = 16
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.rectangle((0, 0, size - 1, size - 1), fill="white", outline="black")
    draw.rectangle((0, 0, size - 1, band), fill=_BAND, outline="black")

    day = str((today or date.today()).day)
    font = _fit_font(draw, day, size - 8, size - band - 8)

    # Centre the visible pixels below the band
    bbox = draw.textbbox((0, 0), day, font=font)
    x = (size - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = band + (size - band - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), day, fill="black", font=font)

    return img
