# repairdesk/utils/qr_codes.py
import base64
from io import BytesIO

import qrcode
from flask import current_app


class QRCodeGenerator:
    @staticmethod
    def to_png_bytes(payload, box_size=10, border=4):
        """Render a payload (usually a URL) as PNG bytes"""
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=box_size,
            border=border,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    @staticmethod
    def to_data_url(payload, **kwargs):
        """Render a payload as a base64 PNG data URL for <img src>"""
        png = QRCodeGenerator.to_png_bytes(payload, **kwargs)
        img_base64 = base64.b64encode(png).decode('utf-8')
        current_app.logger.debug(f'Generated QR code for {payload[:60]}')
        return f"data:image/png;base64,{img_base64}"
