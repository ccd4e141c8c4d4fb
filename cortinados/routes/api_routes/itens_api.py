# cortinados/routes/api_routes/itens_api.py
from flask import Blueprint, request
from flask_login import current_user, login_required

from cortinados.models.constantes import TIPOS_ITEM
from cortinados.services import item_service, projeto_service
from cortinados.services.codigos import normalizar_codigo
from cortinados.services.erros import NaoEncontrado
from cortinados.services.permissoes import pode_ver_tipo
from cortinados.utils.api_utils import erro_api, json_body, parse_int, resposta_api
from cortinados.utils.auth_utils import role_required

itens_api_bp = Blueprint("itens_api_bp", __name__, url_prefix="/api/items")


def _projeto_do_payload(valor):
    """Aceita id numérico ou código do projeto (LIS-0001)."""
    if isinstance(valor, int) or (isinstance(valor, str) and valor.strip().isdigit()):
        return projeto_service.obter_projeto(int(valor))
    projeto = projeto_service.buscar_por_codigo(str(valor))
    if not projeto:
        raise NaoEncontrado("Projeto não encontrado")
    return projeto


@itens_api_bp.get("")
@login_required
def listar():
    a = request.args
    codigo = a.get("codigo")
    if codigo:
        item = item_service.buscar_por_codigo(codigo)
        data = [item.as_dict()] if item else []
        return resposta_api(data, total=len(data))

    if a.get("projeto"):
        itens = item_service.buscar_por_projeto(_projeto_do_payload(a["projeto"]).id)
    elif a.get("status"):
        itens = item_service.buscar_por_status(a["status"])
    elif a.get("tipo"):
        itens = item_service.buscar_por_tipo(a["tipo"])
    else:
        itens = item_service.buscar_recentes()
    return resposta_api([i.as_dict() for i in itens], total=len(itens))


@itens_api_bp.post("")
@role_required("gestor")
def criar():
    body = json_body()
    if not body.get("projeto") or not body.get("tipo") or not body.get("ambiente"):
        return erro_api("Projeto, tipo e ambiente são obrigatórios", 400)

    projeto = _projeto_do_payload(body["projeto"])
    quantidade = parse_int(body.get("quantidade"), 1)
    itens = item_service.criar_itens(projeto, body["tipo"], body["ambiente"], quantidade)
    return resposta_api(
        [i.as_dict() for i in itens],
        f"{len(itens)} item(ns) criado(s) com sucesso",
        201,
    )


@itens_api_bp.get("/stats")
@login_required
def stats():
    return resposta_api(item_service.obter_estatisticas())


@itens_api_bp.get("/buscar")
@login_required
def buscar():
    termo = (request.args.get("q") or "").strip()
    limite = parse_int(request.args.get("limite"), 10, minimo=1, maximo=50)
    if len(termo) < 2:
        return erro_api("Termo de busca deve ter pelo menos 2 caracteres", 400)

    resultados = item_service.buscar_inteligente(termo, limite)
    termo_up = normalizar_codigo(termo)
    data = []
    for item in resultados:
        data.append({
            "id": item.id,
            "codigo": item.codigo,
            "tipo": item.tipo,
            "ambiente": item.ambiente,
            "status": item.status,
            "projeto": item.projeto.resumo() if item.projeto else None,
            "criadoEm": item.criado_em.isoformat() if item.criado_em else None,
            "matchType": "codigo" if termo_up in item.codigo else "ambiente",
        })
    return resposta_api(
        data,
        total=len(data),
        busca={"termo": termo, "limite": limite, "temMaisResultados": len(data) == limite},
    )


@itens_api_bp.get("/type/<tipo>")
@login_required
def por_tipo(tipo: str):
    if tipo not in TIPOS_ITEM:
        return erro_api('Tipo inválido. Use "calha" ou "cortina"', 400)
    if not pode_ver_tipo(current_user.role, tipo):
        return erro_api("Sem permissão para ver este tipo de item", 403)

    status = request.args.get("status") or "todos"
    itens = item_service.buscar_por_tipo(tipo, status)
    return resposta_api(
        [i.as_dict() for i in itens],
        total=len(itens),
        filter={"tipo": tipo, "status": status},
    )


@itens_api_bp.get("/pendentes")
@role_required("medidor")
def pendentes():
    cidade = (request.args.get("cidade") or "").strip() or None
    itens = item_service.buscar_pendentes_por_regiao(cidade)
    return resposta_api([i.as_dict() for i in itens], total=len(itens))


@itens_api_bp.get("/<int:item_id>")
@login_required
def detalhe(item_id: int):
    return resposta_api(item_service.obter_item(item_id).as_dict(incluir_qr=True))


@itens_api_bp.patch("/<int:item_id>/status")
@login_required
def atualizar_status(item_id: int):
    body = json_body()
    novo_status = body.get("status")
    if not novo_status:
        return erro_api("Status é obrigatório", 400)

    item = item_service.obter_item(item_id)
    anterior = item_service.atualizar_status(item, novo_status, current_user, body.get("observacoes"))
    return resposta_api(
        {
            "item": {
                "id": item.id,
                "codigo": item.codigo,
                "status": item.status,
                "statusAnterior": anterior,
                "projeto": item.projeto.resumo() if item.projeto else None,
            }
        },
        f"Status atualizado para {item.status}",
    )


@itens_api_bp.put("/<int:item_id>/medicao")
@role_required("medidor")
def registrar_medicao(item_id: int):
    body = json_body()
    item = item_service.obter_item(item_id)
    item_service.registrar_medidas(item, body, current_user, body.get("observacoes"))
    return resposta_api(
        {
            "item": {
                "id": item.id,
                "codigo": item.codigo,
                "tipo": item.tipo,
                "ambiente": item.ambiente,
                "status": item.status,
                "medidas": item.medidas_dict(),
                "projeto": item.projeto.resumo() if item.projeto else None,
                "medidoPor": current_user.resumo(),
                "dataEm": item.medido_em.isoformat(),
            }
        },
        f"Medidas registradas com sucesso para {item.codigo}",
    )


@itens_api_bp.get("/<int:item_id>/medicao")
@login_required
def obter_medicao(item_id: int):
    item = item_service.obter_item(item_id)
    projeto = item.projeto
    return resposta_api({
        "id": item.id,
        "codigo": item.codigo,
        "tipo": item.tipo,
        "ambiente": item.ambiente,
        "status": item.status,
        "medidas": item.medidas_dict(),
        "medicao": item.medicao_dict(),
        "projeto": {
            "codigo": projeto.codigo,
            "nomeHotel": projeto.nome_hotel,
            "endereco": projeto.endereco,
            "cidade": projeto.cidade,
        },
        "qrCodeUrl": item.qr_code_url,
    })
