# cortinados/routes/rastreamento_routes/etiqueta_routes.py
import io

from flask import Blueprint, Response, request, send_file
from flask_login import login_required

from cortinados.services import item_service
from cortinados.services.erros import NaoEncontrado
from cortinados.services.etiqueta_service import etiqueta_pdf, etiqueta_png
from cortinados.services.qrcode_service import gerar_qr_png

etiqueta_bp = Blueprint("etiqueta_bp", __name__, url_prefix="/qr")


def _item_ou_404(codigo: str):
    item = item_service.buscar_por_codigo(codigo)
    if not item:
        raise NaoEncontrado(f"Item {codigo} não encontrado")
    return item


@etiqueta_bp.get("/<codigo>.svg")
@login_required
def qr_svg(codigo):
    item = _item_ou_404(codigo)
    return Response(item.qr_code, mimetype="image/svg+xml")


@etiqueta_bp.get("/<codigo>.png")
@login_required
def qr_png(codigo):
    item = _item_ou_404(codigo)
    tamanho = request.args.get("tamanho", type=int) or 300
    tamanho = max(100, min(tamanho, 1200))
    return send_file(
        io.BytesIO(gerar_qr_png(item.qr_code_url, tamanho)),
        mimetype="image/png",
        download_name=f"{item.codigo}.png",
    )


@etiqueta_bp.get("/<codigo>/etiqueta")
@login_required
def etiqueta(codigo):
    """PDF no tamanho exato (padrão) ou PNG com ?format=png."""
    item = _item_ou_404(codigo)
    formato = (request.args.get("format") or "pdf").lower()

    if formato == "png":
        return send_file(
            io.BytesIO(etiqueta_png(item)),
            mimetype="image/png",
            download_name=f"etiqueta_{item.codigo}.png",
        )
    return send_file(
        io.BytesIO(etiqueta_pdf(item)),
        mimetype="application/pdf",
        download_name=f"etiqueta_{item.codigo}.pdf",
    )
