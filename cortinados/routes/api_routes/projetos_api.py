# cortinados/routes/api_routes/projetos_api.py
from flask import Blueprint, current_app, request
from flask_login import current_user, login_required

from cortinados.services import item_service, projeto_service
from cortinados.utils.api_utils import erro_api, json_body, parse_data, parse_int, resposta_api
from cortinados.utils.auth_utils import role_required

projetos_api_bp = Blueprint("projetos_api_bp", __name__, url_prefix="/api/projects")


@projetos_api_bp.get("")
@login_required
def listar():
    a = request.args
    projetos = projeto_service.buscar_com_filtros(
        status=a.get("status") or None,
        cidade=a.get("cidade") or None,
        distrito=a.get("distrito") or None,
        codigo=a.get("codigo") or None,
        data_inicio_de=parse_data(a.get("dataInicioDe"), "dataInicioDe"),
        data_inicio_ate=parse_data(a.get("dataInicioAte"), "dataInicioAte"),
        limit=parse_int(a.get("limit"), None, minimo=1, maximo=500),
    )
    return resposta_api([p.as_dict() for p in projetos], total=len(projetos))


@projetos_api_bp.post("")
@role_required("gestor")
def criar():
    projeto = projeto_service.criar_projeto(json_body(), current_user)
    return resposta_api(projeto.as_dict(), "Projeto criado com sucesso", 201)


@projetos_api_bp.get("/stats")
@login_required
def stats():
    return resposta_api(projeto_service.obter_estatisticas())


@projetos_api_bp.get("/com-pendentes")
@role_required("medidor")
def com_pendentes():
    cidade = (request.args.get("cidade") or "").strip() or None
    projetos = projeto_service.buscar_com_itens_pendentes(cidade)
    current_app.logger.info("[projetos] Projetos com pendentes: %d encontrados", len(projetos))
    return resposta_api(projetos, total=len(projetos), filtros={"cidade": cidade or "todas"})


@projetos_api_bp.get("/<int:projeto_id>")
@login_required
def detalhe(projeto_id: int):
    return resposta_api(projeto_service.obter_projeto(projeto_id).as_dict())


@projetos_api_bp.patch("/<int:projeto_id>/status")
@role_required("gestor")
def atualizar_status(projeto_id: int):
    body = json_body()
    projeto = projeto_service.obter_projeto(projeto_id)
    if not body.get("status"):
        return erro_api("Status é obrigatório", 400)
    projeto_service.atualizar_status(projeto, body["status"], body.get("observacoes"))
    return resposta_api(projeto.as_dict(), f"Status do projeto atualizado para {projeto.status}")


@projetos_api_bp.delete("/<int:projeto_id>")
@role_required("gestor")
def excluir(projeto_id: int):
    projeto = projeto_service.obter_projeto(projeto_id)
    codigo = projeto.codigo
    total_itens = projeto_service.excluir_projeto(projeto)
    return resposta_api(
        message=f"Projeto {codigo} excluído com sucesso", deleted={"projeto": 1, "itens": total_itens}
    )


@projetos_api_bp.get("/<int:projeto_id>/relatorio")
@login_required
def relatorio(projeto_id: int):
    projeto = projeto_service.obter_projeto(projeto_id)
    return resposta_api(projeto_service.relatorio(projeto))


# ---------------------------------------------------------------------
# Itens do projeto
# ---------------------------------------------------------------------
@projetos_api_bp.get("/<int:projeto_id>/items")
@login_required
def listar_itens(projeto_id: int):
    projeto = projeto_service.obter_projeto(projeto_id)
    itens = item_service.buscar_com_filtros(
        projeto_id=projeto.id,
        status=request.args.get("status") or None,
        tipo=request.args.get("tipo") or None,
        limite=parse_int(request.args.get("limit"), 100, minimo=1, maximo=500),
    )
    return resposta_api([i.as_dict() for i in itens], total=len(itens), projeto=projeto.resumo())


@projetos_api_bp.post("/<int:projeto_id>/items")
@role_required("gestor")
def criar_itens(projeto_id: int):
    projeto = projeto_service.obter_projeto(projeto_id)
    body = json_body()
    quantidade = body.get("quantidade", 1)
    if isinstance(quantidade, str) and quantidade.strip().isdigit():
        quantidade = int(quantidade)

    itens = item_service.criar_itens(projeto, body.get("tipo"), body.get("ambiente") or "", quantidade)
    qtd = len(itens)
    plural = qtd > 1
    return resposta_api(
        [i.as_dict() for i in itens],
        f"{qtd} ite{'ns' if plural else 'm'} criado{'s' if plural else ''} com sucesso",
        201,
        projeto=projeto.resumo(),
    )


@projetos_api_bp.delete("/<int:projeto_id>/items")
@role_required("gestor")
def excluir_itens(projeto_id: int):
    projeto = projeto_service.obter_projeto(projeto_id)
    total = item_service.excluir_itens_do_projeto(projeto)
    if not total:
        return resposta_api(message="Nenhum item para excluir", deleted=0)
    return resposta_api(
        message=f"{total} ite{'ns' if total != 1 else 'm'} excluído{'s' if total != 1 else ''} com sucesso",
        deleted=total,
    )
