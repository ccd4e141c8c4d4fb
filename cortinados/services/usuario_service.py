# cortinados/services/usuario_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from cortinados import db
from cortinados.models import Usuario
from cortinados.services.erros import ErroValidacao, NaoEncontrado

logger = logging.getLogger(__name__)

CAMPOS_EDITAVEIS = ("nome", "email", "role", "telefone", "empresa", "ativo")
VALORES_VERDADEIROS = ("true", "1", "sim")
VALORES_FALSOS = ("false", "0", "não", "nao")


def obter_usuario(usuario_id: int) -> Usuario:
    usuario = db.session.get(Usuario, usuario_id)
    if not usuario:
        raise NaoEncontrado("Usuário não encontrado")
    return usuario


def buscar_por_email(email: str) -> Optional[Usuario]:
    email = email.strip().lower() if isinstance(email, str) else ""
    if not email:
        return None
    return Usuario.query.filter_by(email=email).first()


def buscar_por_role(role: str) -> List[Usuario]:
    return Usuario.query.filter_by(role=role, ativo=True).order_by(Usuario.nome).all()


def buscar_ativos() -> List[Usuario]:
    return Usuario.query.filter_by(ativo=True).order_by(Usuario.nome).all()


def listar_usuarios(role: Optional[str] = None, ativo: Optional[bool] = None) -> List[Usuario]:
    q = Usuario.query
    if role:
        q = q.filter(Usuario.role == role)
    if ativo is not None:
        q = q.filter(Usuario.ativo == ativo)
    return q.order_by(Usuario.criado_em.desc(), Usuario.id.desc()).all()


def criar_usuario(dados: Dict[str, Any]) -> Usuario:
    """
    Cria um usuário a partir de {nome, email, senha, role, telefone?, empresa?}.
    Commit fica a cargo desta função.
    """
    faltando = [c for c in ("nome", "email", "senha", "role") if not dados.get(c)]
    if faltando:
        raise ErroValidacao("Nome, email, senha e role são obrigatórios")

    if buscar_por_email(dados["email"]):
        raise ErroValidacao("Email já está em uso")

    usuario = Usuario(
        nome=dados["nome"],
        email=dados["email"],
        role=dados["role"],
        telefone=dados.get("telefone"),
        empresa=dados.get("empresa"),
        ativo=True,
    )
    usuario.set_password(dados["senha"])

    db.session.add(usuario)
    db.session.commit()
    logger.info("[usuarios] Usuário criado: %s (%s)", usuario.email, usuario.role)
    return usuario


def parse_ativo(valor) -> bool:
    """Aceita bool ou "true"/"false", "1"/"0", "sim"/"não"; o resto é erro."""
    if isinstance(valor, bool):
        return valor
    if isinstance(valor, (int, str)):
        texto = str(valor).strip().lower()
        if texto in VALORES_VERDADEIROS:
            return True
        if texto in VALORES_FALSOS:
            return False
    raise ErroValidacao("Ativo deve ser verdadeiro ou falso")


def atualizar_usuario(usuario_id: int, dados: Dict[str, Any]) -> Usuario:
    """Atualização parcial; só mexe nos campos enviados."""
    usuario = obter_usuario(usuario_id)

    novo_email = dados.get("email")
    if isinstance(novo_email, str) and novo_email.strip().lower() != usuario.email:
        existente = buscar_por_email(novo_email)
        if existente and existente.id != usuario.id:
            raise ErroValidacao("Email já está em uso")

    for campo in CAMPOS_EDITAVEIS:
        if campo in dados:
            valor = dados[campo]
            if campo == "ativo":
                valor = parse_ativo(valor)
            setattr(usuario, campo, valor)

    if dados.get("senha"):
        usuario.set_password(dados["senha"])

    db.session.commit()
    logger.info("[usuarios] Usuário atualizado: %s", usuario.email)
    return usuario


def atualizar_senha(usuario_id: int, nova_senha: str) -> Usuario:
    usuario = obter_usuario(usuario_id)
    usuario.set_password(nova_senha)
    db.session.commit()
    logger.info("[usuarios] Senha alterada: %s", usuario.email)
    return usuario


def desativar_usuario(usuario_id: int) -> Usuario:
    # Soft delete: o histórico dos itens continua apontando para o usuário
    usuario = obter_usuario(usuario_id)
    usuario.ativo = False
    db.session.commit()
    logger.info("[usuarios] Usuário desativado: %s", usuario.email)
    return usuario


def reativar_usuario(usuario_id: int) -> Usuario:
    usuario = obter_usuario(usuario_id)
    usuario.ativo = True
    db.session.commit()
    logger.info("[usuarios] Usuário reativado: %s", usuario.email)
    return usuario


def autenticar(email: str, senha: str) -> Optional[Usuario]:
    """Retorna o usuário se email/senha conferem e ele está ativo; senão None."""
    usuario = buscar_por_email(email)
    if not usuario or not usuario.ativo:
        return None
    if not usuario.check_password(senha):
        return None
    return usuario
