# cortinados/routes/home_routes/login.py
from urllib.parse import urlsplit

from flask import Blueprint, current_app, redirect, render_template, request, session, url_for
from flask_login import current_user, login_required, login_user, logout_user

from cortinados.services import usuario_service

login_bp = Blueprint("login_bp", __name__)


def _destino_seguro(nxt):
    # Só aceita caminhos internos; navegadores tratam "\" como "/"
    if not nxt or "\\" in nxt or not nxt.startswith("/") or nxt.startswith("//"):
        return url_for("dashboard_bp.dashboard")
    partes = urlsplit(nxt)
    if partes.scheme or partes.netloc:
        return url_for("dashboard_bp.dashboard")
    return nxt


@login_bp.route("/", methods=["GET", "POST"])
def login():
    # Se já estiver logado, manda direto pro dashboard do role
    if current_user.is_authenticated:
        return redirect(url_for("dashboard_bp.dashboard"))

    erro = None
    if request.method == "POST":
        email = request.form.get("email")
        senha = request.form.get("senha")

        usuario = usuario_service.autenticar(email, senha)
        if usuario:
            login_user(usuario)
            session.permanent = True
            current_app.logger.info("[auth] Login (página): %s (%s)", usuario.email, usuario.role)
            return redirect(_destino_seguro(request.args.get("next")))
        erro = "Email ou senha incorretos."

    return render_template("home_templates/login.html", erro=erro)


@login_bp.route("/logout")
@login_required
def logout():
    current_app.logger.info("[auth] Logout (página): %s", current_user.email)
    logout_user()
    return redirect(url_for("login_bp.login"))
