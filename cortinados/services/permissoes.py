# cortinados/services/permissoes.py
"""
Quem pode mover qual item para qual status.

Tabela de transições por role (gestor passa sempre):

    fabrica_trk : calha    medido -> producao, producao -> produzido
    fabrica_crt : cortina  medido -> producao, producao -> produzido
    logistica   : qualquer produzido -> logistica
    instalador  : qualquer logistica -> instalado

A medição (pendente -> medido) não passa por aqui: é feita pelo endpoint
próprio de medidas (medidor/gestor).
"""
from __future__ import annotations

from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from cortinados.models.constantes import STATUS_ITEM

TRANSICOES_FABRICA: Tuple[Tuple[str, str], ...] = (
    ("medido", "producao"),
    ("producao", "produzido"),
)

# role de fábrica -> (tipo que produz, sigla usada nas mensagens)
FABRICAS: Dict[str, Tuple[str, str]] = {
    "fabrica_trk": ("calha", "TRK"),
    "fabrica_crt": ("cortina", "CRT"),
}

TIPOS_VISIVEIS: Dict[str, Tuple[str, ...]] = {
    "calha": ("fabrica_trk", "logistica", "instalador"),
    "cortina": ("fabrica_crt", "logistica", "instalador"),
}

# Prefixos de páginas protegidas -> roles aceitos (gestor sempre passa)
ROTAS_POR_ROLE: Dict[str, Tuple[str, ...]] = {
    "/dashboard/medidor": ("medidor",),
    "/dashboard/fabrica": ("fabrica_trk", "fabrica_crt"),
    "/dashboard/logistica": ("logistica",),
    "/dashboard/instalador": ("instalador",),
    "/dashboard/gestor": ("gestor",),
}

# Dashboard padrão de cada role (usado no redirect de /dashboard)
DASHBOARD_POR_ROLE: Dict[str, str] = {
    "medidor": "medidor",
    "fabrica_trk": "fabrica",
    "fabrica_crt": "fabrica",
    "logistica": "logistica",
    "instalador": "instalador",
    "gestor": "gestor",
}


class ResultadoPermissao(NamedTuple):
    permitido: bool
    motivo: Optional[str] = None


def validar_permissao_status(
    role: str, tipo_item: str, status_atual: str, novo_status: str
) -> ResultadoPermissao:
    if role == "gestor":
        return ResultadoPermissao(True)

    if role in FABRICAS:
        tipo, sigla = FABRICAS[role]
        if tipo_item != tipo:
            return ResultadoPermissao(False, f"Fábrica {sigla} só pode atualizar {tipo}s")
        if (status_atual, novo_status) not in TRANSICOES_FABRICA:
            return ResultadoPermissao(False, f"Transição de status não permitida para {sigla}")
        return ResultadoPermissao(True)

    if role == "logistica":
        if status_atual == "produzido" and novo_status == "logistica":
            return ResultadoPermissao(True)
        return ResultadoPermissao(False, "Logística só pode receber itens produzidos")

    if role == "instalador":
        if status_atual == "logistica" and novo_status == "instalado":
            return ResultadoPermissao(True)
        return ResultadoPermissao(
            False, "Instalador só pode marcar como instalado itens da logística"
        )

    return ResultadoPermissao(False, "Role não autorizado a alterar status")


def transicoes_permitidas(role: str, tipo_item: str, status_atual: str) -> List[str]:
    """Status de destino que o role pode escolher a partir do status atual."""
    return [
        s
        for s in STATUS_ITEM
        if s != status_atual
        and validar_permissao_status(role, tipo_item, status_atual, s).permitido
    ]


def pode_ver_tipo(role: str, tipo: str) -> bool:
    if role == "gestor":
        return True
    return role in TIPOS_VISIVEIS.get(tipo, ())


def tem_permissao(usuario, roles: Iterable[str]) -> bool:
    if usuario is None or not getattr(usuario, "role", None):
        return False
    if usuario.role == "gestor":
        return True
    return usuario.role in tuple(roles)


def roles_da_rota(caminho: str) -> Optional[Tuple[str, ...]]:
    """Roles exigidos para um caminho de página (None = sem restrição por role)."""
    for prefixo, roles in ROTAS_POR_ROLE.items():
        if caminho == prefixo or caminho.startswith(prefixo + "/"):
            return roles
    return None
