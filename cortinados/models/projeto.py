# cortinados/models/projeto.py
from datetime import datetime

from sqlalchemy import event
from sqlalchemy.orm import validates

from cortinados import db
from cortinados.models.constantes import MAX_OBSERVACOES_PROJETO, STATUS_PROJETO
from cortinados.models.validadores import (
    codigo_postal_valido,
    email_valido,
    telefone_pt_valido,
    texto_obrigatorio,
    texto_opcional,
)
from cortinados.services.codigos import codigo_projeto_valido, normalizar_codigo
from cortinados.services.erros import ErroValidacao


class Projeto(db.Model):
    """Obra de um hotel; agrupa os itens (cortinas e calhas)."""

    __tablename__ = "projetos"

    id = db.Column(db.Integer, primary_key=True)
    codigo = db.Column(db.String(8), nullable=False, unique=True)
    nome_hotel = db.Column(db.String(200), nullable=False)
    endereco = db.Column(db.String(300), nullable=False)
    cidade = db.Column(db.String(100), nullable=False, index=True)
    distrito = db.Column(db.String(100), nullable=False, index=True)
    codigo_postal = db.Column(db.String(8), nullable=False)

    contato_nome = db.Column(db.String(100), nullable=False)
    contato_telefone = db.Column(db.String(20), nullable=False)
    contato_email = db.Column(db.String(120), nullable=False)

    status = db.Column(db.String(20), nullable=False, default="medicao", index=True)
    data_inicio = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    data_prevista = db.Column(db.DateTime, nullable=True)
    data_conclusao = db.Column(db.DateTime, nullable=True)
    observacoes = db.Column(db.Text, nullable=True)

    criado_por_id = db.Column(db.Integer, db.ForeignKey("usuarios.id"), nullable=False)
    criado_em = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    atualizado_em = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    criado_por = db.relationship("Usuario", lazy="joined")
    itens = db.relationship(
        "Item",
        back_populates="projeto",
        order_by="Item.id",
        cascade="all, delete-orphan",
    )

    @validates("codigo")
    def _valida_codigo(self, _key, valor):
        valor = normalizar_codigo(valor)
        if not codigo_projeto_valido(valor):
            raise ErroValidacao("Código deve ter formato ABC-1234")
        return valor

    @validates("nome_hotel")
    def _valida_nome_hotel(self, _key, valor):
        return texto_obrigatorio(valor, "Nome do hotel", 200)

    @validates("endereco")
    def _valida_endereco(self, _key, valor):
        return texto_obrigatorio(valor, "Endereço", 300)

    @validates("cidade")
    def _valida_cidade(self, _key, valor):
        return texto_obrigatorio(valor, "Cidade", 100, feminino=True)

    @validates("distrito")
    def _valida_distrito(self, _key, valor):
        return texto_obrigatorio(valor, "Distrito", 100)

    @validates("codigo_postal")
    def _valida_codigo_postal(self, _key, valor):
        valor = texto_obrigatorio(valor, "Código postal", 8)
        if not codigo_postal_valido(valor):
            raise ErroValidacao("Código postal deve ter formato 0000-000")
        return valor

    @validates("contato_nome")
    def _valida_contato_nome(self, _key, valor):
        return texto_obrigatorio(valor, "Nome do contato", 100)

    @validates("contato_telefone")
    def _valida_contato_telefone(self, _key, valor):
        valor = texto_obrigatorio(valor, "Telefone do contato", 20)
        if not telefone_pt_valido(valor):
            raise ErroValidacao("Telefone inválido para Portugal")
        return valor

    @validates("contato_email")
    def _valida_contato_email(self, _key, valor):
        valor = texto_obrigatorio(valor, "Email do contato", 120).lower()
        if not email_valido(valor):
            raise ErroValidacao("Email inválido")
        return valor

    @validates("status")
    def _valida_status(self, _key, valor):
        if valor not in STATUS_PROJETO:
            raise ErroValidacao("Status inválido")
        return valor

    @validates("observacoes")
    def _valida_observacoes(self, _key, valor):
        return texto_opcional(valor, "Observações", MAX_OBSERVACOES_PROJETO, plural=True)

    def resumo(self) -> dict:
        return {
            "id": self.id,
            "codigo": self.codigo,
            "nomeHotel": self.nome_hotel,
            "cidade": self.cidade,
        }

    def as_dict(self) -> dict:
        def _iso(dt):
            return dt.isoformat() if dt else None

        return {
            "id": self.id,
            "codigo": self.codigo,
            "nomeHotel": self.nome_hotel,
            "endereco": self.endereco,
            "cidade": self.cidade,
            "distrito": self.distrito,
            "codigoPostal": self.codigo_postal,
            "contato": {
                "nome": self.contato_nome,
                "telefone": self.contato_telefone,
                "email": self.contato_email,
            },
            "status": self.status,
            "dataInicio": _iso(self.data_inicio),
            "dataPrevista": _iso(self.data_prevista),
            "dataConclusao": _iso(self.data_conclusao),
            "observacoes": self.observacoes,
            "criadoPor": (
                {"id": self.criado_por.id, "nome": self.criado_por.nome, "email": self.criado_por.email}
                if self.criado_por
                else None
            ),
            "criadoEm": _iso(self.criado_em),
            "atualizadoEm": _iso(self.atualizado_em),
        }

    def __repr__(self) -> str:
        return f"<Projeto {self.codigo} status={self.status}>"


@event.listens_for(Projeto, "before_insert")
@event.listens_for(Projeto, "before_update")
def _garante_data_conclusao(_mapper, _connection, projeto: Projeto) -> None:
    # Projeto concluído sempre tem data de conclusão
    if projeto.status == "concluido" and not projeto.data_conclusao:
        projeto.data_conclusao = datetime.utcnow()
