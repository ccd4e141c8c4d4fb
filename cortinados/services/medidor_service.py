# cortinados/services/medidor_service.py
"""Histórico, metas e estatísticas de produtividade do medidor."""
from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from flask import current_app

from cortinados.models import Item

METAS_PADRAO = {"diaria": 20, "semanal": 100, "mensal": 400}


def _area(item: Item) -> str:
    if item.largura and item.altura:
        return f"{item.largura * item.altura / 10000:.2f} m²"
    return "N/A"


def _formatar_historico(item: Item) -> Dict[str, Any]:
    projeto = item.projeto
    return {
        "id": item.id,
        "codigo": item.codigo,
        "tipo": item.tipo,
        "ambiente": item.ambiente,
        "projeto": {
            "codigo": projeto.codigo if projeto else "N/A",
            "nomeHotel": projeto.nome_hotel if projeto else "N/A",
            "cidade": projeto.cidade if projeto else "N/A",
        },
        "medidas": {
            "largura": item.largura or 0,
            "altura": item.altura or 0,
            "profundidade": item.profundidade,
            "area": _area(item),
        },
        "medicao": {
            "dataEm": item.medido_em.isoformat() if item.medido_em else None,
            "observacoes": item.medicao_observacoes,
        },
        "status": item.status,
    }


def _query_medidor(usuario_id: int):
    return Item.query.filter(Item.medido_por_id == usuario_id)


def historico_medidor(usuario_id: int, limite: int = 50, pagina: int = 1) -> Dict[str, Any]:
    limite = max(1, limite)
    pagina = max(1, pagina)

    q = _query_medidor(usuario_id)
    total = q.count()
    itens = (
        q.order_by(Item.medido_em.desc(), Item.id.desc())
        .offset((pagina - 1) * limite)
        .limit(limite)
        .all()
    )
    total_paginas = math.ceil(total / limite) if total else 0
    return {
        "historico": [_formatar_historico(i) for i in itens],
        "paginacao": {
            "pagina": pagina,
            "limite": limite,
            "total": total,
            "totalPaginas": total_paginas,
            "temProxima": pagina < total_paginas,
            "temAnterior": pagina > 1,
        },
    }


def inicios_de_periodo(agora: datetime):
    """(início de hoje, início da semana - domingo, início do mês)."""
    hoje = agora.replace(hour=0, minute=0, second=0, microsecond=0)
    # weekday(): segunda=0 ... domingo=6
    semana = hoje - timedelta(days=(hoje.weekday() + 1) % 7)
    mes = hoje.replace(day=1)
    return hoje, semana, mes


def _percentual(feito: int, meta: int) -> int:
    if not meta:
        return 0
    return min(round(feito / meta * 100), 100)


def stats_medidor(usuario_id: int, agora: Optional[datetime] = None) -> Dict[str, Any]:
    agora = agora or datetime.utcnow()
    hoje, semana, mes = inicios_de_periodo(agora)
    metas = current_app.config.get("METAS_MEDIDOR") or METAS_PADRAO

    q = _query_medidor(usuario_id)
    medicoes = {
        "hoje": q.filter(Item.medido_em >= hoje).count(),
        "estaSemana": q.filter(Item.medido_em >= semana).count(),
        "esteMes": q.filter(Item.medido_em >= mes).count(),
    }
    recentes = q.order_by(Item.medido_em.desc(), Item.id.desc()).limit(5).all()

    return {
        "medicoes": medicoes,
        "metas": dict(metas),
        "percentuais": {
            "diario": _percentual(medicoes["hoje"], metas["diaria"]),
            "semanal": _percentual(medicoes["estaSemana"], metas["semanal"]),
            "mensal": _percentual(medicoes["esteMes"], metas["mensal"]),
        },
        "historicoRecente": [_formatar_historico(i) for i in recentes],
        "ultimaAtualizacao": agora.isoformat(),
    }


def estatisticas_por_medidor(
    usuario_id: int, inicio: Optional[datetime] = None, fim: Optional[datetime] = None
) -> Dict[str, Any]:
    q = _query_medidor(usuario_id)
    if inicio:
        q = q.filter(Item.medido_em >= inicio)
    if fim:
        q = q.filter(Item.medido_em <= fim)
    itens = q.all()

    por_tipo = Counter(i.tipo for i in itens)
    por_dia = Counter(i.medido_em.strftime("%Y-%m-%d") for i in itens if i.medido_em)

    # Tempo entre o item ser cadastrado e ser medido
    tempos = [
        (i.medido_em - i.criado_em).total_seconds() / 3600
        for i in itens
        if i.medido_em and i.criado_em
    ]
    tempo_medio = round(sum(tempos) / len(tempos), 2) if tempos else 0

    return {
        "totalMedicoes": len(itens),
        "porTipo": [{"tipo": t, "quantidade": n} for t, n in sorted(por_tipo.items())],
        "porDia": [{"data": d, "quantidade": n} for d, n in sorted(por_dia.items())],
        "tempoMedioHoras": tempo_medio,
    }
