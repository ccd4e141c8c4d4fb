# cortinados/routes/api_routes/auth_api.py
from flask import Blueprint, current_app, session
from flask_login import current_user, login_required, login_user, logout_user

from cortinados.services import usuario_service
from cortinados.utils.api_utils import erro_api, json_body, resposta_api

auth_api_bp = Blueprint("auth_api_bp", __name__, url_prefix="/api/auth")


def _texto(valor) -> str:
    return valor if isinstance(valor, str) else ""


@auth_api_bp.post("/login")
def login():
    body = json_body()
    email = _texto(body.get("email")).strip()
    senha = _texto(body.get("senha")) or _texto(body.get("password"))

    if not email or not senha:
        return erro_api("Email e senha são obrigatórios", 400)

    usuario = usuario_service.autenticar(email, senha)
    if not usuario:
        current_app.logger.warning("[auth] Login recusado: %s", email)
        return erro_api("Email ou senha incorretos", 401)

    login_user(usuario, remember=bool(body.get("lembrar")))
    # sessão expira após PERMANENT_SESSION_LIFETIME (8h)
    session.permanent = True
    current_app.logger.info("[auth] Login: %s (%s)", usuario.email, usuario.role)
    return resposta_api(usuario.as_dict(), "Login realizado com sucesso")


@auth_api_bp.post("/logout")
@login_required
def logout():
    email = current_user.email
    logout_user()
    current_app.logger.info("[auth] Logout: %s", email)
    return resposta_api(message="Logout realizado com sucesso")


@auth_api_bp.get("/me")
@login_required
def me():
    return resposta_api(current_user.as_dict())
