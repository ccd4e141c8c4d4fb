# cortinados/models/usuario.py
from datetime import datetime

from flask_login import UserMixin
from sqlalchemy.orm import validates
from werkzeug.security import check_password_hash, generate_password_hash

from cortinados import db
from cortinados.models.constantes import ROLES
from cortinados.models.validadores import (
    email_valido,
    telefone_pt_valido,
    texto_obrigatorio,
    texto_opcional,
)
from cortinados.services.erros import ErroValidacao

SENHA_MIN = 6


class Usuario(UserMixin, db.Model):
    __tablename__ = "usuarios"

    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), nullable=False, unique=True)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(20), nullable=False, index=True)
    ativo = db.Column(db.Boolean, nullable=False, default=True, index=True)
    telefone = db.Column(db.String(20), nullable=True)
    empresa = db.Column(db.String(100), nullable=True)
    criado_em = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    atualizado_em = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Flask-Login: usuário inativo não autentica
    @property
    def is_active(self) -> bool:
        return bool(self.ativo)

    def set_password(self, senha: str) -> None:
        if not isinstance(senha, str) or len(senha) < SENHA_MIN:
            raise ErroValidacao(f"Senha deve ter pelo menos {SENHA_MIN} caracteres")
        self.password_hash = generate_password_hash(senha)

    def check_password(self, senha: str) -> bool:
        if not senha or not isinstance(senha, str) or not self.password_hash:
            return False
        return check_password_hash(self.password_hash, senha)

    @validates("nome")
    def _valida_nome(self, _key, valor):
        return texto_obrigatorio(valor, "Nome", 100)

    @validates("email")
    def _valida_email(self, _key, valor):
        valor = valor.strip().lower() if isinstance(valor, str) else ""
        if not valor:
            raise ErroValidacao("Email é obrigatório")
        if not email_valido(valor):
            raise ErroValidacao("Email inválido")
        return valor

    @validates("role")
    def _valida_role(self, _key, valor):
        if valor not in ROLES:
            raise ErroValidacao("Role inválido")
        return valor

    @validates("telefone")
    def _valida_telefone(self, _key, valor):
        if valor is not None and not isinstance(valor, str):
            raise ErroValidacao("Telefone inválido")
        valor = (valor or "").strip() or None
        if valor and not telefone_pt_valido(valor):
            raise ErroValidacao("Telefone inválido")
        return valor

    @validates("empresa")
    def _valida_empresa(self, _key, valor):
        return texto_opcional(valor, "Nome da empresa", 100)

    def resumo(self) -> dict:
        return {"id": self.id, "nome": self.nome, "role": self.role}

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "email": self.email,
            "role": self.role,
            "ativo": self.ativo,
            "telefone": self.telefone,
            "empresa": self.empresa,
            "criadoEm": self.criado_em.isoformat() if self.criado_em else None,
            "atualizadoEm": self.atualizado_em.isoformat() if self.atualizado_em else None,
        }

    def __repr__(self) -> str:
        return f"<Usuario {self.email} role={self.role}>"
