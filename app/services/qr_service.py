"""
QR code generation for the guest portal
"""

import io
import qrcode

from app.core.config import settings

class QRService:
    """Service for generating QR codes"""

    @staticmethod
    def get_portal_url() -> str:
        """URL guests land on after scanning the code"""
        return f"{settings.BASE_URL.rstrip('/')}/guest/portal"

    @staticmethod
    def generate_portal_qr(box_size: int = 10, border: int = 4) -> bytes:
        """Render the guest portal URL as a PNG QR code"""
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=box_size,
            border=border,
        )
        qr.add_data(QRService.get_portal_url())
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()
