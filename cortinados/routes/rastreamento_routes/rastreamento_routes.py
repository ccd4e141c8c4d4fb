# cortinados/routes/rastreamento_routes/rastreamento_routes.py
"""
Rastreamento público do item (destino do QR colado na peça).

Somente leitura e sem login: expõe código, status, projeto, medidas e a
linha do tempo. Dos usuários aparecem apenas nome e role.
"""
from flask import Blueprint, abort, render_template

from cortinados.services import item_service
from cortinados.utils.api_utils import erro_api, resposta_api

rastreamento_bp = Blueprint("rastreamento_bp", __name__)


def _iso(dt):
    return dt.isoformat() if dt else None


def _ator(usuario):
    return {"nome": usuario.nome, "role": usuario.role} if usuario else None


def montar_timeline(item):
    """Eventos do item em ordem cronológica (só os que já aconteceram)."""
    candidatos = [
        (item.criado_em, "criado", "Item criado", None, None),
        (item.medido_em, "medido", "Medição registrada", item.medido_por, item.medicao_observacoes),
        (item.producao_iniciado_em, "producao", "Produção iniciada", item.produzido_por, item.producao_observacoes),
        (item.producao_finalizado_em, "produzido", "Produção finalizada", item.produzido_por, None),
        (item.logistica_processado_em, "logistica", "Recebido na logística",
         item.logistica_processado_por, item.logistica_observacoes),
        (item.instalado_em, "instalado", "Instalado", item.instalado_por, item.instalacao_observacoes),
    ]
    timeline = []
    for quando, tipo, evento, usuario, observacoes in candidatos:
        if not quando:
            continue
        timeline.append({
            "timestamp": quando,
            "type": tipo,
            "event": evento,
            "details": {"usuario": _ator(usuario), "observacoes": observacoes},
        })
    timeline.sort(key=lambda ev: ev["timestamp"])
    for ev in timeline:
        ev["timestamp"] = _iso(ev["timestamp"])
    return timeline


def dados_rastreamento(item):
    projeto = item.projeto
    return {
        "itemId": item.id,
        "codigo": item.codigo,
        "projeto": {
            "codigo": projeto.codigo,
            "nomeHotel": projeto.nome_hotel,
            "cidade": projeto.cidade,
        },
        "tipo": item.tipo,
        "status": item.status,
        "ambiente": item.ambiente,
        "medidas": item.medidas_dict(),
        "ultimaAtualizacao": _iso(item.atualizado_em),
    }


@rastreamento_bp.get("/track/<codigo>")
def pagina_item(codigo):
    item = item_service.buscar_por_codigo(codigo)
    if not item:
        abort(404)
    return render_template(
        "rastreamento_templates/item.html",
        item=item,
        dados=dados_rastreamento(item),
        timeline=montar_timeline(item),
    )


@rastreamento_bp.get("/api/track/<codigo>")
def api_item(codigo):
    item = item_service.buscar_por_codigo(codigo)
    if not item:
        return erro_api(f"Item {codigo} não encontrado", 404)

    timeline = montar_timeline(item)
    data = dados_rastreamento(item)
    data["timeline"] = timeline
    data["summary"] = {
        "total_events": len(timeline),
        "first_event": timeline[0]["timestamp"] if timeline else None,
        "last_event": timeline[-1]["timestamp"] if timeline else None,
    }
    return resposta_api(data)
