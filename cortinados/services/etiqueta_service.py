# cortinados/services/etiqueta_service.py
"""
Etiqueta adesiva do item (40 x 25 mm), colada na calha/cortina embalada.

Layout:
  - QR à esquerda (URL de rastreamento), centralizado na vertical
  - À direita: código do item, "tipo / ambiente", "projeto - hotel"

Saída em PNG (com DPI gravado) ou PDF no tamanho exato; imprimir o PDF em
"Tamanho real (100%)" para o driver não escalar.
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import List

from PIL import Image, ImageDraw, ImageFont
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdf_canvas

from cortinados.services.qrcode_service import gerar_qr_imagem

# --- CONFIG PADRÃO DA ETIQUETA ---
DPI = 300
LABEL_W_MM = 40
LABEL_H_MM = 25

LABEL_W_PX = int(LABEL_W_MM / 25.4 * DPI)
LABEL_H_PX = int(LABEL_H_MM / 25.4 * DPI)

QR_SIZE_PX = int(LABEL_H_PX * 0.80)     # QR = 80% da altura
MARGIN_PX = max(2, LABEL_H_PX // 40)
FONT_PX = max(10, int(LABEL_H_PX * 0.09))
FONT_PX_CODIGO = max(12, int(LABEL_H_PX * 0.11))


def _load_font(size_px: int) -> ImageFont.ImageFont:
    """Tenta fontes TTF comuns; por fim, bitmap default do Pillow."""
    candidates = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
        "C:/Windows/Fonts/arial.ttf",
        "arial.ttf",
        str(Path.cwd() / "arial.ttf"),
    ]
    for fp in candidates:
        try:
            return ImageFont.truetype(fp, size_px)
        except OSError:
            continue
    return ImageFont.load_default()


def _cabe(draw: ImageDraw.ImageDraw, texto: str, font, largura: int) -> str:
    # Corta com "..." até caber na área de texto
    if draw.textlength(texto, font=font) <= largura:
        return texto
    while texto and draw.textlength(texto + "...", font=font) > largura:
        texto = texto[:-1]
    return texto + "..."


def linhas_etiqueta(item) -> List[str]:
    projeto = item.projeto
    return [
        item.codigo,
        f"{item.tipo} / {item.ambiente}",
        f"{projeto.codigo} - {projeto.nome_hotel}" if projeto else "",
    ]


def compor_etiqueta(item) -> Image.Image:
    """Monta a etiqueta em escala de cinza no tamanho final em pixels."""
    qr_img = gerar_qr_imagem(item.qr_code_url, QR_SIZE_PX)

    etq = Image.new("L", (LABEL_W_PX, LABEL_H_PX), color=255)
    draw = ImageDraw.Draw(etq)

    qr_x = MARGIN_PX
    qr_y = (LABEL_H_PX - QR_SIZE_PX) // 2
    etq.paste(qr_img, (qr_x, qr_y))

    text_x = qr_x + QR_SIZE_PX + MARGIN_PX
    text_w = LABEL_W_PX - text_x - MARGIN_PX

    fontes = [_load_font(FONT_PX_CODIGO), _load_font(FONT_PX), _load_font(FONT_PX)]
    linhas = linhas_etiqueta(item)

    line_h = FONT_PX_CODIGO + max(1, FONT_PX // 3)
    start_y = max(MARGIN_PX, (LABEL_H_PX - len(linhas) * line_h) // 2)

    y = start_y
    for linha, font in zip(linhas, fontes):
        draw.text((text_x, y), _cabe(draw, linha, font, text_w), font=font, fill=0)
        y += line_h

    return etq


def etiqueta_png(item) -> bytes:
    # 1-bit: texto sai mais nítido na térmica
    buf = io.BytesIO()
    compor_etiqueta(item).convert("1").save(buf, "PNG", optimize=True, dpi=(DPI, DPI))
    return buf.getvalue()


def etiqueta_pdf(item) -> bytes:
    """PDF com página do tamanho exato da etiqueta."""
    w_pt = LABEL_W_MM * mm
    h_pt = LABEL_H_MM * mm

    buffer = io.BytesIO()
    c = pdf_canvas.Canvas(buffer, pagesize=(w_pt, h_pt))
    c.setTitle(f"Etiqueta {item.codigo}")
    img = ImageReader(compor_etiqueta(item).convert("RGB"))
    c.drawImage(img, 0, 0, width=w_pt, height=h_pt, preserveAspectRatio=False)
    c.showPage()
    c.save()
    return buffer.getvalue()
