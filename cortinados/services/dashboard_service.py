# cortinados/services/dashboard_service.py
"""Números e filas mostrados em cada dashboard por role."""
from __future__ import annotations

from typing import Any, Dict, List

from cortinados.models import Item, Projeto
from cortinados.services import item_service, medidor_service, projeto_service
from cortinados.services.erros import ErroValidacao
from cortinados.services.permissoes import transicoes_permitidas

# fábrica -> tipo que ela enxerga
TIPO_DA_FABRICA = {"fabrica_trk": "calha", "fabrica_crt": "cortina"}


def _fila(status, tipo=None, limite=100, mais_recentes=False) -> List[Item]:
    q = Item.query
    if isinstance(status, str):
        q = q.filter(Item.status == status)
    else:
        q = q.filter(Item.status.in_(tuple(status)))
    if tipo:
        q = q.filter(Item.tipo == tipo)
    ordem = Item.atualizado_em.desc() if mais_recentes else Item.atualizado_em.asc()
    return q.order_by(ordem, Item.id.asc()).limit(limite).all()


def _com_acoes(itens: List[Item], role: str) -> List[Dict[str, Any]]:
    # Cada card já vem com os botões que o role pode usar
    out = []
    for i in itens:
        d = i.as_dict()
        d["acoes"] = transicoes_permitidas(role, i.tipo, i.status)
        out.append(d)
    return out


def dashboard_gestor() -> Dict[str, Any]:
    stats_projetos = projeto_service.obter_estatisticas()
    stats_itens = item_service.obter_estatisticas()

    total_itens = stats_itens["total"]
    instalados = stats_itens["instalado"]

    recentes = Projeto.query.order_by(Projeto.criado_em.desc(), Projeto.id.desc()).limit(5).all()
    return {
        "totalProjetos": stats_projetos["total"],
        "projetosAtivos": len(projeto_service.buscar_ativos()),
        "totalItens": total_itens,
        "itensPendentes": stats_itens["pendente"],
        "itensProducao": stats_itens["producao"] + stats_itens["produzido"],
        "itensInstalados": instalados,
        "eficienciaGeral": round(instalados / total_itens * 100) if total_itens else 0,
        "estatisticasProjetos": stats_projetos,
        "estatisticasItens": stats_itens,
        "projetosRecentes": [
            {**p.as_dict(), "progresso": projeto_service.progresso(p)} for p in recentes
        ],
    }


def tipo_para_fabrica(role: str, tipo_pedido: str = None) -> str:
    if role in TIPO_DA_FABRICA:
        return TIPO_DA_FABRICA[role]
    tipo = tipo_pedido or "calha"
    if tipo not in TIPO_DA_FABRICA.values():
        raise ErroValidacao('Tipo inválido. Use "calha" ou "cortina"')
    return tipo


def dashboard_fabrica(role: str, tipo: str) -> Dict[str, Any]:
    return {
        "tipo": tipo,
        "aguardandoProducao": _com_acoes(_fila("medido", tipo), role),
        "emProducao": _com_acoes(_fila("producao", tipo), role),
        "estatisticas": item_service.obter_estatisticas(tipo),
    }


def dashboard_logistica(role: str) -> Dict[str, Any]:
    return {
        "aguardandoRecebimento": _com_acoes(_fila("produzido"), role),
        "emLogistica": _com_acoes(_fila("logistica"), role),
        "estatisticas": item_service.obter_estatisticas(),
    }


def dashboard_instalador(role: str) -> Dict[str, Any]:
    return {
        "prontosParaInstalar": _com_acoes(_fila("logistica"), role),
        "instaladosRecentes": [i.as_dict() for i in _fila("instalado", limite=20, mais_recentes=True)],
    }


def dashboard_medidor(usuario) -> Dict[str, Any]:
    return {
        "stats": medidor_service.stats_medidor(usuario.id),
        "projetosComPendentes": projeto_service.buscar_com_itens_pendentes(),
    }
