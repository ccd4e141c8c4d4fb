# cortinados/services/qrcode_service.py
"""
Geração de QR Codes dos itens.

O QR aponta para a página pública de rastreamento: {QR_BASE_URL}/{codigo}.
O SVG fica gravado no próprio item (coluna qr_code); PNG e data URL são
gerados sob demanda para impressão e telas.
"""
from __future__ import annotations

import base64
import io

import qrcode
import qrcode.constants
import qrcode.image.svg
from flask import current_app
from PIL import Image

QR_BORDER = 2
# ~200px de largura para um QR de 25 módulos + borda
QR_SVG_BOX_SIZE = 7


def montar_qr_code_url(codigo: str) -> str:
    base = (current_app.config.get("QR_BASE_URL") or "http://localhost:5000/track").rstrip("/")
    return f"{base}/{codigo}"


def _qr(url: str, box_size: int) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=QR_BORDER,
    )
    qr.add_data(url)
    qr.make(fit=True)
    return qr


def gerar_qr_svg(url: str) -> str:
    """Retorna o SVG (texto) do QR para a URL."""
    qr = _qr(url, QR_SVG_BOX_SIZE)
    img = qr.make_image(image_factory=qrcode.image.svg.SvgPathImage)
    svg = img.to_string(encoding="unicode")
    if isinstance(svg, bytes):
        svg = svg.decode("utf-8")
    return svg


def gerar_qr_imagem(url: str, tamanho: int = 300) -> Image.Image:
    """QR em escala de cinza, redimensionado para tamanho x tamanho (sem suavizar)."""
    qr = _qr(url, 10)
    img = qr.make_image(fill_color="black", back_color="white").convert("L")
    return img.resize((tamanho, tamanho), Image.NEAREST)


def gerar_qr_png(url: str, tamanho: int = 300) -> bytes:
    buf = io.BytesIO()
    gerar_qr_imagem(url, tamanho).save(buf, "PNG", optimize=True)
    return buf.getvalue()


def gerar_qr_data_url(url: str, tamanho: int = 300) -> str:
    # Uso em <img src="..."> nas telas
    b64 = base64.b64encode(gerar_qr_png(url, tamanho)).decode("ascii")
    return f"data:image/png;base64,{b64}"
