# cortinados/utils/auth_utils.py
from functools import wraps

from flask import current_app, redirect, request, url_for
from flask_login import current_user

from cortinados import db
from cortinados.models import Usuario
from cortinados.services.permissoes import tem_permissao
from cortinados.utils.api_utils import erro_api

# Caminhos que respondem JSON (e não redirect) quando falta login
PREFIXOS_JSON = ("/api/", "/qr/")


def _quer_json() -> bool:
    return request.path.startswith(PREFIXOS_JSON)


def registrar_login_manager(login_manager) -> None:
    @login_manager.user_loader
    def load_user(user_id):
        try:
            return db.session.get(Usuario, int(user_id))
        except (TypeError, ValueError):
            return None

    @login_manager.unauthorized_handler
    def nao_autenticado():
        if _quer_json():
            return erro_api("Não autenticado", 401)
        return redirect(url_for("login_bp.login", next=request.path))


def role_required(*roles):
    """
    Exige login e um dos roles informados (gestor sempre passa).
    API -> 403 JSON; página -> volta ao /dashboard com ?error=access_denied.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return current_app.login_manager.unauthorized()
            if not tem_permissao(current_user, roles):
                current_app.logger.warning(
                    "[auth] Acesso negado: %s (%s) em %s",
                    current_user.email, current_user.role, request.path,
                )
                if _quer_json():
                    return erro_api("Acesso não autorizado", 403)
                return redirect(url_for("dashboard_bp.dashboard", error="access_denied"))
            return view(*args, **kwargs)

        return wrapper

    return decorator
