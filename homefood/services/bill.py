import logging
import re
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from homefood.schemas.orders import Order

log = logging.getLogger(__name__)

BILL_WIDTH_PX = 420
MARGIN_PX = 16
LINE_GAP_PX = 6


def bill_filename(order: Order) -> str:
    """ddMMyy_mealType_Customer_Name.png"""
    who = re.sub(r"[\s/\\]+", "_", (order.customer_name or order.customer_id).strip())
    return f"{order.date.strftime('%d%m%y')}_{order.meal_type}_{who}.png"


def _fmt(x: float) -> str:
    return "Rs." + f"{x:.2f}".rstrip("0").rstrip(".")


def bill_lines(order: Order, business_name: str) -> list[str]:
    lines = [
        business_name,
        f"Customer: {order.customer_name}",
        f"Date: {order.date.strftime('%d/%m/%Y')}  Meal: {order.meal_type}",
        "-" * 32,
    ]
    for i in order.items:
        if i.quantity > 0:
            lines.append(f"{i.name} x{i.quantity} @ {_fmt(i.unit_price)} = {_fmt(i.amount)}")
    lines += [
        "-" * 32,
        f"Subtotal: {_fmt(order.subtotal)}",
        f"Delivery: {_fmt(order.delivery_charge)}",
        f"Grand Total: {_fmt(order.grand_total)}",
    ]
    return lines


class BillImageExporter:
    """Renders a confirmed order's bill to a PNG under ``directory``."""

    def __init__(self, directory: str, business_name: str):
        self.directory = Path(directory)
        self.business_name = business_name

    def render(self, order: Order) -> Image.Image:
        font = ImageFont.load_default()
        lines = bill_lines(order, self.business_name)

        probe = ImageDraw.Draw(Image.new("RGB", (1, 1), "white"))
        heights = []
        for text in lines:
            bbox = probe.textbbox((0, 0), text, font=font)
            heights.append(bbox[3] - bbox[1])
        canvas_h = 2 * MARGIN_PX + sum(heights) + LINE_GAP_PX * len(lines)

        img = Image.new("RGB", (BILL_WIDTH_PX, canvas_h), "white")
        draw = ImageDraw.Draw(img)
        y = MARGIN_PX
        for text, h in zip(lines, heights):
            draw.text((MARGIN_PX, y), text, font=font, fill="black")
            y += h + LINE_GAP_PX
        return img

    def export(self, order: Order) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / bill_filename(order)
        self.render(order).save(path, format="PNG")
        log.info("bill written to %s", path)
        return path
