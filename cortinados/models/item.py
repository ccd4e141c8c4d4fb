# cortinados/models/item.py
import math
from datetime import datetime

from sqlalchemy import event, inspect
from sqlalchemy.orm import validates

from cortinados import db
from cortinados.models.constantes import MAX_OBSERVACOES_ITEM, STATUS_ITEM, TIPOS_ITEM
from cortinados.models.validadores import texto_obrigatorio, texto_opcional
from cortinados.services.codigos import codigo_item_valido, normalizar_codigo
from cortinados.services.erros import ErroValidacao


def _iso(dt):
    return dt.isoformat() if dt else None


def _ator(usuario):
    return usuario.resumo() if usuario else None


def _medida(valor, campo: str) -> float:
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        raise ErroValidacao(f"{campo} deve ser um número")
    if not math.isfinite(numero):
        raise ErroValidacao(f"{campo} deve ser um número")
    return numero


class Item(db.Model):
    """
    Cortina ou calha de um projeto.

    Cada etapa do fluxo guarda quem fez e quando, em grupos de colunas:
      medicao    -> medido_por / medido_em
      producao   -> producao_iniciado_em / producao_finalizado_em / produzido_por
      logistica  -> logistica_processado_em / logistica_processado_por
      instalacao -> instalado_em / instalado_por
    """

    __tablename__ = "itens"

    id = db.Column(db.Integer, primary_key=True)
    codigo = db.Column(db.String(20), nullable=False, unique=True)
    projeto_id = db.Column(db.Integer, db.ForeignKey("projetos.id"), nullable=False, index=True)
    tipo = db.Column(db.String(10), nullable=False, index=True)
    ambiente = db.Column(db.String(100), nullable=False)

    # Medidas (cm)
    largura = db.Column(db.Float, nullable=True)
    altura = db.Column(db.Float, nullable=True)
    profundidade = db.Column(db.Float, nullable=True)
    medidas_observacoes = db.Column(db.String(500), nullable=True)

    status = db.Column(db.String(20), nullable=False, default="pendente", index=True)

    qr_code = db.Column(db.Text, nullable=False)
    qr_code_url = db.Column(db.String(300), nullable=False)

    # medição
    medido_por_id = db.Column(db.Integer, db.ForeignKey("usuarios.id"), nullable=True, index=True)
    medido_em = db.Column(db.DateTime, nullable=True, index=True)
    medicao_observacoes = db.Column(db.String(500), nullable=True)

    # produção
    producao_iniciado_em = db.Column(db.DateTime, nullable=True)
    producao_finalizado_em = db.Column(db.DateTime, nullable=True)
    produzido_por_id = db.Column(db.Integer, db.ForeignKey("usuarios.id"), nullable=True)
    producao_observacoes = db.Column(db.String(500), nullable=True)

    # logística
    logistica_processado_em = db.Column(db.DateTime, nullable=True)
    logistica_processado_por_id = db.Column(db.Integer, db.ForeignKey("usuarios.id"), nullable=True)
    logistica_observacoes = db.Column(db.String(500), nullable=True)

    # instalação
    instalado_em = db.Column(db.DateTime, nullable=True)
    instalado_por_id = db.Column(db.Integer, db.ForeignKey("usuarios.id"), nullable=True)
    instalacao_observacoes = db.Column(db.String(500), nullable=True)

    criado_em = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    atualizado_em = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    projeto = db.relationship("Projeto", back_populates="itens")
    medido_por = db.relationship("Usuario", foreign_keys=[medido_por_id])
    produzido_por = db.relationship("Usuario", foreign_keys=[produzido_por_id])
    logistica_processado_por = db.relationship("Usuario", foreign_keys=[logistica_processado_por_id])
    instalado_por = db.relationship("Usuario", foreign_keys=[instalado_por_id])

    @validates("codigo")
    def _valida_codigo(self, _key, valor):
        valor = normalizar_codigo(valor)
        if not valor:
            raise ErroValidacao("Código é obrigatório")
        if not codigo_item_valido(valor):
            raise ErroValidacao("Código deve ter formato ABC-1234-01-TRK")
        return valor

    @validates("tipo")
    def _valida_tipo(self, _key, valor):
        if valor not in TIPOS_ITEM:
            raise ErroValidacao("Tipo deve ser cortina ou calha")
        return valor

    @validates("ambiente")
    def _valida_ambiente(self, _key, valor):
        return texto_obrigatorio(valor, "Ambiente", 100)

    @validates("status")
    def _valida_status(self, _key, valor):
        if valor not in STATUS_ITEM:
            raise ErroValidacao("Status inválido")
        return valor

    @validates("largura", "altura")
    def _valida_dimensao(self, key, valor):
        if valor is None:
            return None
        valor = _medida(valor, key.capitalize())
        if valor < 0.1:
            raise ErroValidacao(f"{key.capitalize()} deve ser maior que 0")
        return valor

    @validates("profundidade")
    def _valida_profundidade(self, _key, valor):
        if valor is None:
            return None
        valor = _medida(valor, "Profundidade")
        if valor < 0:
            raise ErroValidacao("Profundidade não pode ser negativa")
        return valor

    @validates(
        "medidas_observacoes",
        "medicao_observacoes",
        "producao_observacoes",
        "logistica_observacoes",
        "instalacao_observacoes",
    )
    def _valida_observacoes(self, _key, valor):
        return texto_opcional(valor, "Observações", MAX_OBSERVACOES_ITEM, plural=True)

    # -----------------------------------------------------------------
    # Serialização
    # -----------------------------------------------------------------
    def medidas_dict(self):
        if self.largura is None and self.altura is None:
            return None
        return {
            "largura": self.largura,
            "altura": self.altura,
            "profundidade": self.profundidade,
            "observacoes": self.medidas_observacoes,
        }

    def medicao_dict(self):
        if not self.medido_em:
            return None
        return {
            "medidoPor": _ator(self.medido_por),
            "dataEm": _iso(self.medido_em),
            "observacoes": self.medicao_observacoes,
        }

    def producao_dict(self):
        if not (self.producao_iniciado_em or self.producao_finalizado_em):
            return None
        return {
            "iniciadoEm": _iso(self.producao_iniciado_em),
            "finalizadoEm": _iso(self.producao_finalizado_em),
            "produzidoPor": _ator(self.produzido_por),
            "observacoes": self.producao_observacoes,
        }

    def logistica_dict(self):
        if not self.logistica_processado_em:
            return None
        return {
            "processadoEm": _iso(self.logistica_processado_em),
            "processadoPor": _ator(self.logistica_processado_por),
            "observacoes": self.logistica_observacoes,
        }

    def instalacao_dict(self):
        if not self.instalado_em:
            return None
        return {
            "instaladoEm": _iso(self.instalado_em),
            "instaladoPor": _ator(self.instalado_por),
            "observacoes": self.instalacao_observacoes,
        }

    def as_dict(self, incluir_qr: bool = False) -> dict:
        d = {
            "id": self.id,
            "codigo": self.codigo,
            "projeto": self.projeto.resumo() if self.projeto else None,
            "tipo": self.tipo,
            "ambiente": self.ambiente,
            "medidas": self.medidas_dict(),
            "status": self.status,
            "qrCodeUrl": self.qr_code_url,
            "medicao": self.medicao_dict(),
            "producao": self.producao_dict(),
            "logistica": self.logistica_dict(),
            "instalacao": self.instalacao_dict(),
            "criadoEm": _iso(self.criado_em),
            "atualizadoEm": _iso(self.atualizado_em),
        }
        if incluir_qr:
            d["qrCode"] = self.qr_code
        return d

    def __repr__(self) -> str:
        return f"<Item {self.codigo} status={self.status}>"


# ---------------------------------------------------------------------
# QR gerado na criação e sempre que o código mudar
# ---------------------------------------------------------------------
def _atualiza_qr(item: Item) -> None:
    from cortinados.services.qrcode_service import gerar_qr_svg, montar_qr_code_url

    item.qr_code_url = montar_qr_code_url(item.codigo)
    item.qr_code = gerar_qr_svg(item.qr_code_url)


@event.listens_for(Item, "before_insert")
def _qr_antes_de_inserir(_mapper, _connection, item: Item) -> None:
    _atualiza_qr(item)


@event.listens_for(Item, "before_update")
def _qr_antes_de_atualizar(_mapper, _connection, item: Item) -> None:
    if inspect(item).attrs.codigo.history.has_changes():
        _atualiza_qr(item)
