# cortinados/utils/api_utils.py
"""
Envelope JSON padrão das APIs e tratamento centralizado de erros.

Formato:
    {"success": bool, "data"?: ..., "message"?: str, "error"?: str, "timestamp": iso}
Chaves extras (total, projeto, filter, busca, deleted...) vão no topo.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from flask import current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException, InternalServerError

from cortinados import db
from cortinados.services.erros import ErroDominio, ErroValidacao


def _agora_iso() -> str:
    return datetime.utcnow().isoformat() + "Z"


def resposta_api(data: Any = None, message: Optional[str] = None, status: int = 200, **extras):
    payload = {"success": True}
    if data is not None:
        payload["data"] = data
    if message:
        payload["message"] = message
    payload.update(extras)
    payload["timestamp"] = _agora_iso()
    return jsonify(payload), status


def erro_api(message: str, status: int = 400, error: Optional[str] = None, **extras):
    payload = {"success": False, "message": message}
    if error:
        payload["error"] = error
    payload.update(extras)
    payload["timestamp"] = _agora_iso()
    return jsonify(payload), status


# ---------------------------------------------------------------------
# Leitura de parâmetros
# ---------------------------------------------------------------------
def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def parse_int(valor, padrao: Optional[int] = None, minimo: Optional[int] = None, maximo: Optional[int] = None):
    if valor is None or valor == "":
        return padrao
    try:
        n = int(valor)
    except (TypeError, ValueError):
        return padrao
    if minimo is not None:
        n = max(minimo, n)
    if maximo is not None:
        n = min(maximo, n)
    return n


def parse_bool(valor) -> Optional[bool]:
    if valor is None or valor == "":
        return None
    if isinstance(valor, bool):
        return valor
    return str(valor).strip().lower() in ("1", "true", "sim", "yes", "on")


def parse_data(valor, campo: str = "data") -> Optional[datetime]:
    if not valor:
        return None
    try:
        return datetime.fromisoformat(str(valor).replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        raise ErroValidacao(f"Parâmetro {campo} inválido: {valor}")


def _eh_api() -> bool:
    return request.path.startswith("/api/")


# ---------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------
def registrar_error_handlers(app) -> None:
    @app.errorhandler(ErroDominio)
    def _erro_dominio(e: ErroDominio):
        db.session.rollback()
        if e.status_code >= 403:
            current_app.logger.warning("[api] %s %s -> %s: %s", request.method, request.path, e.status_code, e.mensagem)
        return erro_api(e.mensagem, e.status_code)

    @app.errorhandler(IntegrityError)
    def _integridade(e: IntegrityError):
        db.session.rollback()
        current_app.logger.warning("[api] IntegrityError em %s: %s", request.path, e.orig)
        return erro_api("Dados duplicados - registro já existe", 409)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        if not _eh_api():
            return e
        return erro_api(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _inesperado(e: Exception):
        db.session.rollback()
        current_app.logger.exception("[api] Erro inesperado em %s %s", request.method, request.path)
        if not _eh_api():
            return InternalServerError()
        detalhe = str(e) if current_app.debug else None
        return erro_api("Erro interno do servidor", 500, error=detalhe)
