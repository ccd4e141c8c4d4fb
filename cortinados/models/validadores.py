# cortinados/models/validadores.py
"""Regras de formato compartilhadas pelos modelos e pelas rotas."""

import re
from typing import Optional

from cortinados.services.erros import ErroValidacao

EMAIL_RE = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
CODIGO_POSTAL_RE = re.compile(r"^\d{4}-\d{3}$")
# Telefone português: +351 opcional e 9 dígitos começando de 2 a 9
TELEFONE_PT_RE = re.compile(r"^(\+351)?[2-9]\d{8}$")


def texto_obrigatorio(
    valor: Optional[str], campo: str, max_len: int, feminino: bool = False
) -> str:
    # Número, lista etc. contam como ausentes
    valor = valor.strip() if isinstance(valor, str) else ""
    if not valor:
        sufixo = "a" if feminino else "o"
        raise ErroValidacao(f"{campo} é obrigatóri{sufixo}")
    if len(valor) > max_len:
        raise ErroValidacao(f"{campo} não pode ter mais de {max_len} caracteres")
    return valor


def texto_opcional(
    valor: Optional[str], campo: str, max_len: int, plural: bool = False
) -> Optional[str]:
    if valor is None:
        return None
    if not isinstance(valor, str):
        verbo = "devem" if plural else "deve"
        raise ErroValidacao(f"{campo} {verbo} ser texto")
    valor = valor.strip()
    if not valor:
        return None
    if len(valor) > max_len:
        verbo = "podem" if plural else "pode"
        raise ErroValidacao(f"{campo} não {verbo} ter mais de {max_len} caracteres")
    return valor


def email_valido(valor: Optional[str]) -> bool:
    return isinstance(valor, str) and bool(EMAIL_RE.match(valor))


def telefone_pt_valido(valor: Optional[str]) -> bool:
    if not valor or not isinstance(valor, str):
        return False
    return bool(TELEFONE_PT_RE.match(re.sub(r"\s", "", valor)))


def codigo_postal_valido(valor: Optional[str]) -> bool:
    return isinstance(valor, str) and bool(CODIGO_POSTAL_RE.match(valor))
