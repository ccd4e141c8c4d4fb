# cortinados/routes/api_routes/dashboard_api.py
from flask import Blueprint, request
from flask_login import current_user

from cortinados.services import dashboard_service
from cortinados.utils.api_utils import resposta_api
from cortinados.utils.auth_utils import role_required

dashboard_api_bp = Blueprint("dashboard_api_bp", __name__, url_prefix="/api/dashboard")


@dashboard_api_bp.get("/gestor")
@role_required("gestor")
def gestor():
    return resposta_api(dashboard_service.dashboard_gestor())


@dashboard_api_bp.get("/fabrica")
@role_required("fabrica_trk", "fabrica_crt")
def fabrica():
    tipo = dashboard_service.tipo_para_fabrica(current_user.role, request.args.get("tipo"))
    return resposta_api(dashboard_service.dashboard_fabrica(current_user.role, tipo))


@dashboard_api_bp.get("/logistica")
@role_required("logistica")
def logistica():
    return resposta_api(dashboard_service.dashboard_logistica(current_user.role))


@dashboard_api_bp.get("/instalador")
@role_required("instalador")
def instalador():
    return resposta_api(dashboard_service.dashboard_instalador(current_user.role))


@dashboard_api_bp.get("/medidor")
@role_required("medidor")
def medidor():
    return resposta_api(dashboard_service.dashboard_medidor(current_user))
