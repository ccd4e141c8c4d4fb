# cortinados/services/item_service.py
"""
Regras de negócio dos itens: criação com código/QR, medição, mudanças de
status com carimbo de quem/quando, e as buscas usadas pelas telas.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func

from cortinados import db
from cortinados.models import Item, Projeto
from cortinados.models.constantes import (
    MAX_OBSERVACOES_ITEM,
    STATUS_ITEM,
    STATUS_PROJETO_ENCERRADO,
    TIPOS_ITEM,
)
from cortinados.models.validadores import texto_opcional
from cortinados.services.codigos import gerar_codigo_item, normalizar_codigo
from cortinados.services.erros import ErroValidacao, NaoEncontrado, PermissaoNegada
from cortinados.services.permissoes import validar_permissao_status

logger = logging.getLogger(__name__)

QUANTIDADE_MAX = 50
LIMITE_LISTAGEM = 100


# ---------------------------------------------------------------------
# Leitura
# ---------------------------------------------------------------------
def obter_item(item_id: int) -> Item:
    item = db.session.get(Item, item_id)
    if not item:
        raise NaoEncontrado("Item não encontrado")
    return item


def buscar_por_codigo(codigo: str) -> Optional[Item]:
    return Item.query.filter_by(codigo=normalizar_codigo(codigo)).first()


def buscar_por_projeto(projeto_id: int) -> List[Item]:
    return Item.query.filter_by(projeto_id=projeto_id).order_by(Item.criado_em.asc(), Item.id.asc()).all()


def buscar_por_status(status: str) -> List[Item]:
    return Item.query.filter_by(status=status).order_by(Item.criado_em.desc(), Item.id.desc()).all()


def buscar_por_tipo(tipo: str, status: Optional[str] = None, limite: int = LIMITE_LISTAGEM) -> List[Item]:
    q = Item.query.filter(Item.tipo == tipo)
    if status and status != "todos":
        q = q.filter(Item.status == status)
    return (
        q.order_by(Item.status.asc(), Item.medido_em.desc(), Item.criado_em.desc(), Item.id.desc())
        .limit(limite)
        .all()
    )


def buscar_recentes(limite: int = LIMITE_LISTAGEM) -> List[Item]:
    return Item.query.order_by(Item.criado_em.desc(), Item.id.desc()).limit(limite).all()


def buscar_pendentes_por_regiao(cidade: Optional[str] = None) -> List[Item]:
    q = Item.query.filter(Item.status == "pendente")
    if cidade:
        q = q.join(Projeto, Item.projeto_id == Projeto.id).filter(
            Projeto.cidade.icontains(cidade, autoescape=True)
        )
    return q.order_by(Item.criado_em.asc(), Item.id.asc()).all()


def buscar_por_codigo_parcial(termo: str, limite: int = 10) -> List[Item]:
    return (
        Item.query.filter(
            Item.codigo.icontains(normalizar_codigo(termo), autoescape=True),
            Item.status == "pendente",
        )
        .order_by(Item.codigo.asc())
        .limit(limite)
        .all()
    )


def buscar_inteligente(termo: str, limite: int = 10) -> List[Item]:
    """
    Busca de itens pendentes para o medidor:
      1) código exato
      2) código parcial
      3) ambiente
    Para no primeiro passo que trouxer resultado.
    """
    termo = (termo or "").strip()
    resultados = (
        Item.query.filter(Item.codigo == normalizar_codigo(termo), Item.status == "pendente")
        .limit(limite)
        .all()
    )
    if not resultados:
        resultados = buscar_por_codigo_parcial(termo, min(limite, 10))
    if not resultados:
        resultados = (
            Item.query.filter(
                Item.ambiente.icontains(termo, autoescape=True),
                Item.status == "pendente",
            )
            .order_by(Item.criado_em.asc(), Item.id.asc())
            .limit(limite)
            .all()
        )
    return resultados


def buscar_com_filtros(
    projeto_id: Optional[int] = None,
    status: Optional[str] = None,
    tipo: Optional[str] = None,
    ambiente: Optional[str] = None,
    limite: Optional[int] = None,
) -> List[Item]:
    q = Item.query
    if projeto_id:
        q = q.filter(Item.projeto_id == projeto_id)
    if status:
        q = q.filter(Item.status == status)
    if tipo:
        q = q.filter(Item.tipo == tipo)
    if ambiente:
        q = q.filter(Item.ambiente.icontains(ambiente, autoescape=True))
    q = q.order_by(Item.criado_em.desc(), Item.id.desc())
    if limite:
        q = q.limit(limite)
    return q.all()


def obter_estatisticas(tipo: Optional[str] = None) -> Dict[str, int]:
    estatisticas = {s: 0 for s in STATUS_ITEM}
    estatisticas["total"] = 0
    q = db.session.query(Item.status, func.count(Item.id))
    if tipo:
        q = q.filter(Item.tipo == tipo)
    for status, count in q.group_by(Item.status).all():
        if status in estatisticas:
            estatisticas[status] = count
            estatisticas["total"] += count
    return estatisticas


# ---------------------------------------------------------------------
# Escrita
# ---------------------------------------------------------------------
def _valida_criacao(projeto: Projeto, tipo: str, ambiente: str, quantidade: int) -> None:
    if projeto.status in STATUS_PROJETO_ENCERRADO:
        raise ErroValidacao("Não é possível criar itens em projetos concluídos ou cancelados")
    if tipo not in TIPOS_ITEM:
        raise ErroValidacao('Tipo deve ser "cortina" ou "calha"')
    if not isinstance(ambiente, str) or not ambiente.strip():
        raise ErroValidacao("Ambiente é obrigatório")
    if not isinstance(quantidade, int) or isinstance(quantidade, bool) or not (1 <= quantidade <= QUANTIDADE_MAX):
        raise ErroValidacao(f"Quantidade deve ser um número entre 1 e {QUANTIDADE_MAX}")


def _novo_item(projeto: Projeto, tipo: str, ambiente: str) -> Item:
    item = Item(
        codigo=gerar_codigo_item(projeto, tipo),
        projeto=projeto,
        tipo=tipo,
        ambiente=ambiente,
        status="pendente",
    )
    db.session.add(item)
    # flush dispara o listener do QR e deixa o código visível para o próximo do lote
    db.session.flush()
    return item


def criar_item(projeto: Projeto, tipo: str, ambiente: str) -> Item:
    return criar_itens(projeto, tipo, ambiente, 1)[0]


def criar_itens(projeto: Projeto, tipo: str, ambiente: str, quantidade: int = 1) -> List[Item]:
    """
    Cria `quantidade` itens no projeto numa única transação: ou todos ou
    nenhum. Com mais de um, o ambiente ganha o sufixo " (i)".
    """
    _valida_criacao(projeto, tipo, ambiente, quantidade)
    ambiente = ambiente.strip()

    itens: List[Item] = []
    try:
        for i in range(quantidade):
            nome = f"{ambiente} ({i + 1})" if quantidade > 1 else ambiente
            itens.append(_novo_item(projeto, tipo, nome))
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "[itens] %d item(ns) criado(s) em %s: %s",
        len(itens), projeto.codigo, ", ".join(i.codigo for i in itens),
    )
    return itens


def excluir_itens_do_projeto(projeto: Projeto) -> int:
    total = Item.query.filter_by(projeto_id=projeto.id).delete(synchronize_session=False)
    db.session.commit()
    db.session.expire(projeto, ["itens"])
    logger.info("[itens] %d item(ns) excluído(s) de %s", total, projeto.codigo)
    return total


def _numero(valor, campo: str) -> Optional[float]:
    if valor is None or valor == "":
        return None
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        raise ErroValidacao(f"{campo} deve ser um número")
    # NaN e infinito passariam nas comparações abaixo
    if not math.isfinite(numero):
        raise ErroValidacao(f"{campo} deve ser um número")
    return numero


def registrar_medidas(
    item: Item, medidas: Dict[str, Any], usuario, observacoes: Optional[str] = None
) -> Item:
    """
    pendente -> medido. Medidas em cm: largura e altura > 0, profundidade >= 0.
    """
    if item.status != "pendente":
        raise ErroValidacao(f"Item já foi medido (status atual: {item.status})")

    if not medidas.get("largura") or not medidas.get("altura"):
        raise ErroValidacao("Largura e altura são obrigatórias")

    largura = _numero(medidas.get("largura"), "Largura")
    altura = _numero(medidas.get("altura"), "Altura")
    profundidade = _numero(medidas.get("profundidade"), "Profundidade")

    if largura is None or largura < 0.1:
        raise ErroValidacao("Largura deve ser um número positivo")
    if altura is None or altura < 0.1:
        raise ErroValidacao("Altura deve ser um número positivo")
    if profundidade is not None and profundidade < 0:
        raise ErroValidacao("Profundidade deve ser um número não negativo")

    obs = texto_opcional(observacoes, "Observações", MAX_OBSERVACOES_ITEM, plural=True)

    item.largura = largura
    item.altura = altura
    item.profundidade = profundidade
    item.medidas_observacoes = obs
    item.status = "medido"
    item.medido_por_id = usuario.id
    item.medido_em = datetime.utcnow()
    item.medicao_observacoes = obs
    db.session.commit()

    dims = f"{largura:g}x{altura:g}" + (f"x{profundidade:g}" if profundidade is not None else "")
    logger.info("[itens] Medição registrada: %s (%s cm) por %s", item.codigo, dims, usuario.email)
    return item


def atualizar_status(
    item: Item, novo_status: str, usuario, observacoes: Optional[str] = None
) -> str:
    """
    Aplica a transição se o role do usuário permitir e carimba a etapa.
    Retorna o status anterior.
    """
    if not novo_status:
        raise ErroValidacao("Status é obrigatório")
    if novo_status not in STATUS_ITEM:
        raise ErroValidacao("Status inválido")

    resultado = validar_permissao_status(usuario.role, item.tipo, item.status, novo_status)
    if not resultado.permitido:
        logger.warning(
            "[itens] Transição negada: %s %s -> %s por %s (%s): %s",
            item.codigo, item.status, novo_status, usuario.email, usuario.role, resultado.motivo,
        )
        raise PermissaoNegada(resultado.motivo)

    anterior = item.status
    agora = datetime.utcnow()
    obs = texto_opcional(observacoes, "Observações", MAX_OBSERVACOES_ITEM, plural=True)

    if novo_status == "producao":
        item.producao_iniciado_em = agora
        item.produzido_por_id = usuario.id
        item.producao_observacoes = obs
    elif novo_status == "produzido":
        item.producao_finalizado_em = agora
        if obs:
            item.producao_observacoes = obs
    elif novo_status == "logistica":
        item.logistica_processado_em = agora
        item.logistica_processado_por_id = usuario.id
        item.logistica_observacoes = obs
    elif novo_status == "instalado":
        item.instalado_em = agora
        item.instalado_por_id = usuario.id
        item.instalacao_observacoes = obs

    item.status = novo_status
    db.session.commit()
    logger.info("[itens] Status atualizado: %s %s -> %s por %s", item.codigo, anterior, novo_status, usuario.email)
    return anterior
