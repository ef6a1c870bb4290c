import base64
import io

import qrcode


class QREncoder:
    """Render an opaque identifier as a PNG QR code, returned as a data URL."""

    def __init__(self, box_size: int = 10, border: int = 4):
        self.box_size = box_size
        self.border = border

    def to_png(self, data: str) -> bytes:
        qr = qrcode.QRCode(version=None, box_size=self.box_size, border=self.border)
        qr.add_data(data)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def to_data_url(self, data: str) -> str:
        return "data:image/png;base64," + base64.b64encode(self.to_png(data)).decode()
