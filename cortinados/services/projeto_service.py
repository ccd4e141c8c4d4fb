# cortinados/services/projeto_service.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func

from cortinados import db
from cortinados.models import Item, Projeto
from cortinados.models.constantes import STATUS_PROJETO, STATUS_PROJETO_ENCERRADO
from cortinados.models.validadores import (
    codigo_postal_valido,
    email_valido,
    telefone_pt_valido,
)
from cortinados.services.codigos import gerar_proximo_codigo_projeto, normalizar_codigo
from cortinados.services.erros import ErroValidacao, NaoEncontrado

logger = logging.getLogger(__name__)

# (campo, mensagem) na ordem em que o formulário é conferido
CAMPOS_OBRIGATORIOS = (
    ("nomeHotel", "Nome do hotel é obrigatório"),
    ("endereco", "Endereço é obrigatório"),
    ("cidade", "Cidade é obrigatória"),
    ("distrito", "Distrito é obrigatório"),
    ("codigoPostal", "Código postal é obrigatório"),
)


def _parse_data(valor) -> Optional[datetime]:
    if not valor:
        return None
    if isinstance(valor, datetime):
        return valor
    try:
        return datetime.fromisoformat(str(valor).replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        raise ErroValidacao(f"Data inválida: {valor}")


def validar_dados_projeto(dados: Dict[str, Any]) -> None:
    """Validação do payload de criação, com as mensagens mostradas no formulário."""
    for campo, mensagem in CAMPOS_OBRIGATORIOS:
        if not str(dados.get(campo) or "").strip():
            raise ErroValidacao(mensagem)

    if not codigo_postal_valido(str(dados["codigoPostal"]).strip()):
        raise ErroValidacao("Código postal deve ter o formato XXXX-XXX")

    contato = dados.get("contato")
    if not isinstance(contato, dict):
        raise ErroValidacao("Informações de contato são obrigatórias")
    if not str(contato.get("nome") or "").strip():
        raise ErroValidacao("Nome do contato é obrigatório")
    if not str(contato.get("telefone") or "").strip():
        raise ErroValidacao("Telefone do contato é obrigatório")
    if not str(contato.get("email") or "").strip():
        raise ErroValidacao("Email do contato é obrigatório")
    if not email_valido(str(contato["email"]).strip().lower()):
        raise ErroValidacao("Email do contato é inválido")
    if not telefone_pt_valido(contato["telefone"]):
        raise ErroValidacao("Telefone deve ter formato português válido")


def obter_projeto(projeto_id: int) -> Projeto:
    projeto = db.session.get(Projeto, projeto_id)
    if not projeto:
        raise NaoEncontrado("Projeto não encontrado")
    return projeto


def buscar_por_codigo(codigo: str) -> Optional[Projeto]:
    return Projeto.query.filter_by(codigo=normalizar_codigo(codigo)).first()


def criar_projeto(dados: Dict[str, Any], criado_por) -> Projeto:
    validar_dados_projeto(dados)
    contato = dados["contato"]

    projeto = Projeto(
        codigo=gerar_proximo_codigo_projeto(),
        nome_hotel=dados["nomeHotel"],
        endereco=dados["endereco"],
        cidade=dados["cidade"],
        distrito=dados["distrito"],
        codigo_postal=str(dados["codigoPostal"]).strip(),
        contato_nome=contato["nome"],
        contato_telefone=contato["telefone"],
        contato_email=contato["email"],
        data_prevista=_parse_data(dados.get("dataPrevista")),
        observacoes=dados.get("observacoes"),
        criado_por_id=criado_por.id,
    )
    if dados.get("dataInicio"):
        projeto.data_inicio = _parse_data(dados["dataInicio"])

    db.session.add(projeto)
    db.session.commit()
    logger.info("[projetos] Projeto criado: %s - %s por %s", projeto.codigo, projeto.nome_hotel, criado_por.email)
    return projeto


def atualizar_status(projeto: Projeto, novo_status: str, observacoes: Optional[str] = None) -> Projeto:
    if novo_status not in STATUS_PROJETO:
        raise ErroValidacao("Status inválido")

    anterior = projeto.status
    projeto.status = novo_status
    if novo_status == "concluido":
        projeto.data_conclusao = datetime.utcnow()
    if observacoes:
        projeto.observacoes = observacoes

    db.session.commit()
    logger.info("[projetos] %s: %s -> %s", projeto.codigo, anterior, novo_status)
    return projeto


def excluir_projeto(projeto: Projeto) -> int:
    """Remove o projeto e seus itens. Retorna quantos itens foram junto."""
    total_itens = len(projeto.itens)
    codigo = projeto.codigo
    db.session.delete(projeto)
    db.session.commit()
    logger.info("[projetos] Projeto excluído: %s (%d itens)", codigo, total_itens)
    return total_itens


def buscar_com_filtros(
    status: Optional[str] = None,
    cidade: Optional[str] = None,
    distrito: Optional[str] = None,
    data_inicio_de: Optional[datetime] = None,
    data_inicio_ate: Optional[datetime] = None,
    codigo: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Projeto]:
    q = Projeto.query
    if codigo:
        q = q.filter(Projeto.codigo == normalizar_codigo(codigo))
    if status:
        q = q.filter(Projeto.status == status)
    if cidade:
        q = q.filter(Projeto.cidade.icontains(cidade, autoescape=True))
    if distrito:
        q = q.filter(Projeto.distrito.icontains(distrito, autoescape=True))
    if data_inicio_de:
        q = q.filter(Projeto.data_inicio >= data_inicio_de)
    if data_inicio_ate:
        q = q.filter(Projeto.data_inicio <= data_inicio_ate)
    q = q.order_by(Projeto.criado_em.desc(), Projeto.id.desc())
    if limit:
        q = q.limit(limit)
    return q.all()


def buscar_ativos() -> List[Projeto]:
    return (
        Projeto.query.filter(Projeto.status.notin_(STATUS_PROJETO_ENCERRADO))
        .order_by(Projeto.criado_em.desc(), Projeto.id.desc())
        .all()
    )


def obter_estatisticas() -> Dict[str, int]:
    estatisticas = {s: 0 for s in STATUS_PROJETO}
    estatisticas["total"] = 0
    linhas = db.session.query(Projeto.status, func.count(Projeto.id)).group_by(Projeto.status).all()
    for status, count in linhas:
        if status in estatisticas:
            estatisticas[status] = count
            estatisticas["total"] += count
    return estatisticas


def buscar_com_itens_pendentes(cidade: Optional[str] = None) -> List[Dict[str, Any]]:
    """Projetos com itens ainda por medir, mais urgentes (mais pendentes) primeiro."""
    contagem = (
        db.session.query(Item.projeto_id, func.count(Item.id).label("total"))
        .filter(Item.status == "pendente")
        .group_by(Item.projeto_id)
        .subquery()
    )
    q = db.session.query(Projeto, contagem.c.total).join(contagem, contagem.c.projeto_id == Projeto.id)
    if cidade:
        q = q.filter(Projeto.cidade.icontains(cidade, autoescape=True))

    resultado = []
    for projeto, total in q.all():
        d = projeto.as_dict()
        d["totalItensPendentes"] = total
        resultado.append(d)
    resultado.sort(key=lambda p: p["totalItensPendentes"], reverse=True)
    return resultado


def progresso(projeto: Projeto) -> Dict[str, Any]:
    itens = projeto.itens
    total = len(itens)
    status = [i.status for i in itens]
    # "medidos" conta tudo que já passou pela medição
    medidos = sum(1 for s in status if s not in ("pendente", "cancelado"))
    produzidos = sum(1 for s in status if s in ("produzido", "logistica", "instalado"))
    instalados = status.count("instalado")
    return {
        "total": total,
        "medidos": medidos,
        "produzidos": produzidos,
        "instalados": instalados,
        "percentualConclusao": round(instalados / total * 100) if total else 0,
    }


def relatorio(projeto: Projeto) -> Dict[str, Any]:
    return {
        "projeto": projeto.as_dict(),
        "itens": [i.as_dict() for i in projeto.itens],
        "progresso": progresso(projeto),
    }
