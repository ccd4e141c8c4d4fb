# cortinados/routes/api_routes/medidor_api.py
from flask import Blueprint, request
from flask_login import current_user

from cortinados.services import medidor_service, usuario_service
from cortinados.utils.api_utils import parse_data, parse_int, resposta_api
from cortinados.utils.auth_utils import role_required

medidor_api_bp = Blueprint("medidor_api_bp", __name__, url_prefix="/api/medidor")


def _alvo():
    # gestor pode consultar outro medidor via ?medidor=<id>
    if current_user.role == "gestor" and request.args.get("medidor"):
        return usuario_service.obter_usuario(parse_int(request.args.get("medidor"), 0))
    return current_user


@medidor_api_bp.get("/historico")
@role_required("medidor")
def historico():
    alvo = _alvo()
    limite = parse_int(request.args.get("limite"), 50, minimo=1, maximo=200)
    pagina = parse_int(request.args.get("pagina"), 1, minimo=1)
    data = medidor_service.historico_medidor(alvo.id, limite, pagina)
    data["resumo"] = {
        "totalMedicoes": data["paginacao"]["total"],
        "medidor": alvo.nome,
    }
    return resposta_api(data)


@medidor_api_bp.get("/stats")
@role_required("medidor")
def stats():
    alvo = _alvo()
    data = medidor_service.stats_medidor(alvo.id)
    data["medidor"] = {"id": alvo.id, "nome": alvo.nome}
    return resposta_api(data)


@medidor_api_bp.get("/estatisticas")
@role_required("medidor")
def estatisticas():
    alvo = _alvo()
    inicio = parse_data(request.args.get("inicio"), "inicio")
    fim = parse_data(request.args.get("fim"), "fim")
    return resposta_api(medidor_service.estatisticas_por_medidor(alvo.id, inicio, fim))
