# cortinados/routes/home_routes/dashboard.py
from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from cortinados import db
from cortinados.services import dashboard_service, item_service
from cortinados.services.codigos import codigo_item_valido, normalizar_codigo
from cortinados.services.erros import ErroDominio, ErroValidacao
from cortinados.services.permissoes import DASHBOARD_POR_ROLE, roles_da_rota, tem_permissao

dashboard_bp = Blueprint("dashboard_bp", __name__, url_prefix="/dashboard")

AREAS = ("gestor", "fabrica", "logistica", "instalador", "medidor")


@dashboard_bp.route("")
@login_required
def dashboard():
    """Manda cada role para o seu painel (mantém ?error=... se houver)."""
    area = DASHBOARD_POR_ROLE.get(current_user.role, "gestor")
    erro = request.args.get("error")
    if erro:
        return redirect(url_for("dashboard_bp.area", area=area, error=erro))
    return redirect(url_for("dashboard_bp.area", area=area))


@dashboard_bp.route("/scanner")
@login_required
def scanner():
    """Leitura do QR: aceita o código ou a URL de rastreamento inteira."""
    lido = (request.args.get("codigo") or "").strip()
    if not lido:
        return render_template("home_templates/scanner.html", lido="", erro=None)

    codigo = normalizar_codigo(lido.rstrip("/").rsplit("/", 1)[-1])
    if codigo_item_valido(codigo) and item_service.buscar_por_codigo(codigo):
        return redirect(url_for("rastreamento_bp.pagina_item", codigo=codigo))

    current_app.logger.info("[scanner] Código não encontrado: %s (%s)", lido, current_user.email)
    return render_template(
        "home_templates/scanner.html", lido=lido, erro=f"Item {codigo} não encontrado"
    )


@dashboard_bp.route("/itens/<int:item_id>/status", methods=["POST"])
@login_required
def mudar_status(item_id):
    """Botões de ação das tabelas do painel."""
    voltar = request.form.get("voltar")
    if voltar not in AREAS:
        voltar = DASHBOARD_POR_ROLE.get(current_user.role, "gestor")

    try:
        item = item_service.obter_item(item_id)
        anterior = item_service.atualizar_status(item, request.form.get("status"), current_user)
    except ErroDominio as e:
        db.session.rollback()
        flash(e.mensagem, "erro")
    else:
        flash(f"Item {item.codigo} atualizado de {anterior} para {item.status}", "sucesso")

    return redirect(url_for("dashboard_bp.area", area=voltar))


@dashboard_bp.route("/<area>")
@login_required
def area(area):
    if area not in AREAS:
        abort(404)

    roles = roles_da_rota(request.path) or ()
    if not tem_permissao(current_user, roles):
        return redirect(url_for("dashboard_bp.dashboard", error="access_denied"))

    role = current_user.role
    if area == "gestor":
        dados = dashboard_service.dashboard_gestor()
    elif area == "fabrica":
        try:
            tipo = dashboard_service.tipo_para_fabrica(role, request.args.get("tipo"))
        except ErroValidacao:
            return redirect(url_for("dashboard_bp.area", area="fabrica", error="tipo_invalido"))
        dados = dashboard_service.dashboard_fabrica(role, tipo)
    elif area == "logistica":
        dados = dashboard_service.dashboard_logistica(role)
    elif area == "instalador":
        dados = dashboard_service.dashboard_instalador(role)
    else:
        dados = dashboard_service.dashboard_medidor(current_user)

    return render_template(
        "home_templates/dashboard.html",
        area=area,
        dados=dados,
        erro=request.args.get("error"),
    )
