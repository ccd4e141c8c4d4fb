# cortinados/models/constantes.py
"""Valores fixos do domínio (roles, tipos e status)."""

from typing import Dict, List

# Papéis de usuário
ROLES: List[str] = [
    "medidor",      # registra medidas nos hotéis
    "fabrica_trk",  # produz calhas
    "fabrica_crt",  # produz cortinas
    "logistica",    # monta kits para entrega
    "instalador",   # confirma instalação via QR
    "gestor",       # supervisiona tudo
]

TIPOS_ITEM: List[str] = ["cortina", "calha"]

# Sufixo do código do item por tipo
SUFIXO_TIPO: Dict[str, str] = {
    "calha": "TRK",
    "cortina": "CRT",
}

# Pipeline do item; "cancelado" fica fora da sequência
PIPELINE_ITEM: List[str] = [
    "pendente",
    "medido",
    "producao",
    "produzido",
    "logistica",
    "instalado",
]
STATUS_ITEM: List[str] = PIPELINE_ITEM + ["cancelado"]

STATUS_PROJETO: List[str] = [
    "medicao",
    "producao",
    "logistica",
    "instalacao",
    "concluido",
    "cancelado",
]
STATUS_PROJETO_ENCERRADO = ("concluido", "cancelado")

MAX_OBSERVACOES_ITEM = 500
MAX_OBSERVACOES_PROJETO = 1000
