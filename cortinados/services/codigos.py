# cortinados/services/codigos.py
"""
Códigos legíveis de projetos e itens.

  - Projeto: PPP-NNNN          (ex.: LIS-0001)
  - Item:    PPP-NNNN-SS-TTT   (ex.: LIS-0001-01-TRK)

      PPP  : prefixo de 3 letras (config PROJETO_PREFIXO, padrão 'LIS')
      NNNN : sequencial global de projetos, zero-pad em 4 dígitos
      SS   : sequencial do item dentro do projeto, zero-pad em 2 dígitos
      TTT  : TRK para calha, CRT para cortina
"""
from __future__ import annotations

import re
from typing import Optional

from flask import current_app

from cortinados.models.constantes import SUFIXO_TIPO
from cortinados.services.erros import Conflito, ErroValidacao

CODIGO_PROJETO_RE = re.compile(r"^[A-Z]{3}-\d{4}$")
CODIGO_ITEM_RE = re.compile(r"^[A-Z]{3}-\d{4}-\d{2}-(TRK|CRT)$")

MAX_SEQ_PROJETO = 9999
MAX_SEQ_ITEM = 99


def normalizar_codigo(codigo: Optional[str]) -> str:
    return (codigo or "").strip().upper()


def codigo_projeto_valido(codigo: Optional[str]) -> bool:
    return bool(CODIGO_PROJETO_RE.match(normalizar_codigo(codigo)))


def codigo_item_valido(codigo: Optional[str]) -> bool:
    return bool(CODIGO_ITEM_RE.match(normalizar_codigo(codigo)))


def _prefixo() -> str:
    prefixo = normalizar_codigo(current_app.config.get("PROJETO_PREFIXO") or "LIS")
    if not re.match(r"^[A-Z]{3}$", prefixo):
        raise ErroValidacao(f"Prefixo de projeto inválido: {prefixo}")
    return prefixo


def gerar_proximo_codigo_projeto() -> str:
    """
    Próximo código a partir do último projeto criado (LIS-0315 -> LIS-0316).
    Sem projetos, começa em PPP-0001.
    """
    from cortinados.models import Projeto  # import tardio (evita ciclo)

    prefixo = _prefixo()
    ultimo = Projeto.query.order_by(Projeto.criado_em.desc(), Projeto.id.desc()).first()
    if not ultimo:
        return f"{prefixo}-0001"

    numero = int(ultimo.codigo.split("-")[1]) + 1
    if numero > MAX_SEQ_PROJETO:
        raise Conflito("Limite de códigos de projeto atingido")
    return f"{prefixo}-{numero:04d}"


def _seq_do_codigo_item(codigo: str) -> int:
    # "LIS-0001-07-CRT" -> 7
    return int(codigo.split("-")[2])


def gerar_codigo_item(projeto, tipo: str) -> str:
    """
    Código do próximo item do projeto. O sequencial segue o MAIOR já usado
    no projeto (e não a contagem), então itens excluídos não geram colisão.
    """
    from cortinados.models import Item  # import tardio (evita ciclo)

    if projeto is None:
        raise ErroValidacao("Projeto não encontrado")
    sufixo = SUFIXO_TIPO.get(tipo)
    if not sufixo:
        raise ErroValidacao("Tipo deve ser cortina ou calha")

    # autoflush: itens do mesmo lote ainda não commitados também entram aqui
    codigos = [
        c for (c,) in Item.query.with_entities(Item.codigo).filter(Item.projeto_id == projeto.id)
    ]
    maior = max((_seq_do_codigo_item(c) for c in codigos), default=0)
    proximo = maior + 1
    if proximo > MAX_SEQ_ITEM:
        raise Conflito(f"Projeto {projeto.codigo} atingiu o limite de {MAX_SEQ_ITEM} itens")
    return f"{projeto.codigo}-{proximo:02d}-{sufixo}"
