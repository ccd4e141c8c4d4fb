import pytest

from cortinados import db
from cortinados.models import Item
from cortinados.services.erros import ErroValidacao

from conftest import criar_itens, forcar_status


def _patch_status(cliente, item_id, status, **extra):
    return cliente.patch(f"/api/items/{item_id}/status", json={"status": status, **extra})


def test_criar_item_pelo_codigo_do_projeto(como, projeto):
    resp = como("gestor").post(
        "/api/items", json={"projeto": "lis-0001", "tipo": "calha", "ambiente": "Quarto 201"}
    )
    assert resp.status_code == 201
    item = resp.get_json()["data"][0]
    assert item["codigo"] == "LIS-0001-01-TRK"
    assert item["status"] == "pendente"
    assert item["medidas"] is None
    assert item["qrCodeUrl"].endswith("/LIS-0001-01-TRK")


def test_criar_item_campos_obrigatorios(como, projeto):
    resp = como("gestor").post("/api/items", json={"projeto": projeto["id"], "tipo": "calha"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Projeto, tipo e ambiente são obrigatórios"

    resp = como("gestor").post(
        "/api/items", json={"projeto": projeto["id"], "tipo": "persiana", "ambiente": "Sala"}
    )
    assert resp.get_json()["message"] == 'Tipo deve ser "cortina" ou "calha"'

    resp = como("gestor").post("/api/items", json={"projeto": "POR-0042", "tipo": "calha", "ambiente": "Sala"})
    assert resp.status_code == 404


def test_criar_item_so_gestor(como, projeto):
    resp = como("medidor").post(
        "/api/items", json={"projeto": projeto["id"], "tipo": "calha", "ambiente": "Sala"}
    )
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Acesso não autorizado"


def test_detalhe_inclui_qr(app, como, projeto):
    item = criar_itens(app, projeto["id"], "cortina")[0]
    data = como("logistica").get(f"/api/items/{item['id']}").get_json()["data"]
    assert data["codigo"] == "LIS-0001-01-CRT"
    assert "svg" in data["qrCode"]
    assert como("logistica").get("/api/items/999").status_code == 404


def test_medicao_registra_e_carimba(app, como, projeto, usuarios):
    item = criar_itens(app, projeto["id"], "calha")[0]
    resp = como("medidor").put(
        f"/api/items/{item['id']}/medicao",
        json={"largura": 250, "altura": 200, "profundidade": 12.5, "observacoes": " teto falso "},
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "Medidas registradas com sucesso para LIS-0001-01-TRK"
    dados = body["data"]["item"]
    assert dados["status"] == "medido"
    assert dados["medidas"] == {"largura": 250.0, "altura": 200.0, "profundidade": 12.5, "observacoes": "teto falso"}
    assert dados["medidoPor"]["id"] == usuarios["medidor"]["id"]

    medicao = como("gestor").get(f"/api/items/{item['id']}/medicao").get_json()["data"]
    assert medicao["medicao"]["medidoPor"]["role"] == "medidor"
    assert medicao["projeto"]["nomeHotel"] == "Hotel Tivoli Avenida"

    resp = como("medidor").put(f"/api/items/{item['id']}/medicao", json={"largura": 1, "altura": 1})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Item já foi medido (status atual: medido)"


def test_medicao_validacoes(app, como, projeto):
    item = criar_itens(app, projeto["id"], "calha")[0]
    medidor = como("medidor")
    url = f"/api/items/{item['id']}/medicao"

    assert medidor.put(url, json={"largura": 100}).get_json()["message"] == "Largura e altura são obrigatórias"
    assert medidor.put(url, json={"largura": -5, "altura": 100}).get_json()["message"] == (
        "Largura deve ser um número positivo"
    )
    assert medidor.put(url, json={"largura": 100, "altura": "abc"}).get_json()["message"] == (
        "Altura deve ser um número"
    )
    assert medidor.put(url, json={"largura": 100, "altura": 100, "profundidade": -1}).get_json()["message"] == (
        "Profundidade deve ser um número não negativo"
    )
    with app.app_context():
        assert db.session.get(Item, item["id"]).status == "pendente"

    assert como("logistica").put(url, json={"largura": 1, "altura": 1}).status_code == 403


def test_medicao_recusa_nan_e_infinito(app, como, projeto):
    item = criar_itens(app, projeto["id"], "calha")[0]
    medidor = como("medidor")
    url = f"/api/items/{item['id']}/medicao"

    resp = medidor.put(url, json={"largura": "NaN", "altura": "inf"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Largura deve ser um número"
    assert medidor.put(url, json={"largura": 100, "altura": "inf"}).get_json()["message"] == (
        "Altura deve ser um número"
    )
    assert medidor.put(url, json={"largura": 100, "altura": 100, "profundidade": "-Infinity"}).get_json()[
        "message"
    ] == "Profundidade deve ser um número"
    with app.app_context():
        assert db.session.get(Item, item["id"]).status == "pendente"


def test_modelo_recusa_medida_nao_finita(app, projeto):
    item = criar_itens(app, projeto["id"], "calha")[0]
    with app.app_context():
        registro = db.session.get(Item, item["id"])
        with pytest.raises(ErroValidacao, match="Largura deve ser um número"):
            registro.largura = float("nan")
        with pytest.raises(ErroValidacao, match="Profundidade deve ser um número"):
            registro.profundidade = "inf"


def test_fluxo_completo_de_uma_calha(app, como, projeto, usuarios):
    item = criar_itens(app, projeto["id"], "calha")[0]
    forcar_status(app, item["id"], "medido")

    fabrica = como("fabrica_trk")
    resp = _patch_status(fabrica, item["id"], "producao")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["item"]["statusAnterior"] == "medido"
    assert _patch_status(fabrica, item["id"], "produzido", observacoes="pintado").status_code == 200

    assert _patch_status(como("logistica"), item["id"], "logistica").status_code == 200
    resp = _patch_status(como("instalador"), item["id"], "instalado")
    assert resp.get_json()["message"] == "Status atualizado para instalado"

    detalhe = como("gestor").get(f"/api/items/{item['id']}").get_json()["data"]
    assert detalhe["producao"]["produzidoPor"]["id"] == usuarios["fabrica_trk"]["id"]
    assert detalhe["producao"]["observacoes"] == "pintado"
    assert detalhe["producao"]["finalizadoEm"] is not None
    assert detalhe["logistica"]["processadoPor"]["role"] == "logistica"
    assert detalhe["instalacao"]["instaladoPor"]["id"] == usuarios["instalador"]["id"]


def test_transicoes_negadas_pela_api(app, como, projeto):
    calha = criar_itens(app, projeto["id"], "calha")[0]
    cortina = criar_itens(app, projeto["id"], "cortina")[0]
    forcar_status(app, calha["id"], "medido")
    forcar_status(app, cortina["id"], "medido")

    resp = _patch_status(como("fabrica_crt"), calha["id"], "producao")
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Fábrica CRT só pode atualizar cortinas"

    resp = _patch_status(como("logistica"), cortina["id"], "logistica")
    assert resp.get_json()["message"] == "Logística só pode receber itens produzidos"

    resp = _patch_status(como("medidor"), cortina["id"], "producao")
    assert resp.get_json()["message"] == "Role não autorizado a alterar status"

    with app.app_context():
        assert db.session.get(Item, calha["id"]).status == "medido"


def test_status_obrigatorio_e_invalido(app, como, projeto):
    item = criar_itens(app, projeto["id"], "calha")[0]
    gestor = como("gestor")
    assert gestor.patch(f"/api/items/{item['id']}/status", json={}).get_json()["message"] == "Status é obrigatório"
    resp = _patch_status(gestor, item["id"], "perdido")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Status inválido"


def test_gestor_cancela_e_reabre(app, como, projeto):
    item = criar_itens(app, projeto["id"], "cortina")[0]
    gestor = como("gestor")
    assert _patch_status(gestor, item["id"], "cancelado").status_code == 200
    resp = _patch_status(gestor, item["id"], "pendente")
    assert resp.get_json()["data"]["item"]["statusAnterior"] == "cancelado"


def test_listagem_por_tipo_respeita_a_fabrica(app, como, projeto):
    criar_itens(app, projeto["id"], "calha", quantidade=2)
    criar_itens(app, projeto["id"], "cortina")

    resp = como("fabrica_trk").get("/api/items/type/calha")
    body = resp.get_json()
    assert body["total"] == 2
    assert body["filter"] == {"tipo": "calha", "status": "todos"}

    resp = como("fabrica_trk").get("/api/items/type/cortina")
    assert resp.status_code == 403

    assert como("gestor").get("/api/items/type/persiana").status_code == 400
    assert como("logistica").get("/api/items/type/cortina?status=pendente").get_json()["total"] == 1


def test_listagem_geral(app, como, projeto):
    itens = criar_itens(app, projeto["id"], "calha", quantidade=3)
    forcar_status(app, itens[0]["id"], "medido")
    gestor = como("gestor")

    assert gestor.get("/api/items").get_json()["total"] == 3
    assert gestor.get("/api/items?status=medido").get_json()["total"] == 1
    assert gestor.get("/api/items?projeto=LIS-0001").get_json()["total"] == 3
    por_codigo = gestor.get("/api/items?codigo=lis-0001-02-trk").get_json()
    assert [i["ambiente"] for i in por_codigo["data"]] == ["Quarto 101 (2)"]
    assert gestor.get("/api/items?codigo=LIS-0001-09-TRK").get_json()["total"] == 0


def test_busca_inteligente(app, como, projeto):
    criar_itens(app, projeto["id"], "calha", ambiente="Suite Presidencial")
    criar_itens(app, projeto["id"], "cortina", ambiente="Restaurante")
    medidor = como("medidor")

    exato = medidor.get("/api/items/buscar?q=lis-0001-01-trk").get_json()
    assert [i["codigo"] for i in exato["data"]] == ["LIS-0001-01-TRK"]
    assert exato["data"][0]["matchType"] == "codigo"

    parcial = medidor.get("/api/items/buscar?q=0001-0").get_json()
    assert parcial["total"] == 2

    ambiente = medidor.get("/api/items/buscar?q=restaur").get_json()
    assert ambiente["data"][0]["matchType"] == "ambiente"
    assert ambiente["busca"]["temMaisResultados"] is False

    resp = medidor.get("/api/items/buscar?q=a")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Termo de busca deve ter pelo menos 2 caracteres"


def test_busca_ignora_itens_ja_medidos(app, como, projeto):
    item = criar_itens(app, projeto["id"], "calha", ambiente="Lobby")[0]
    forcar_status(app, item["id"], "medido")
    assert como("medidor").get("/api/items/buscar?q=lobby").get_json()["total"] == 0


def test_pendentes_por_cidade(app, como, projeto):
    itens = criar_itens(app, projeto["id"], "calha", quantidade=2)
    forcar_status(app, itens[0]["id"], "medido")
    medidor = como("medidor")
    assert medidor.get("/api/items/pendentes").get_json()["total"] == 1
    assert medidor.get("/api/items/pendentes?cidade=lisb").get_json()["total"] == 1
    assert medidor.get("/api/items/pendentes?cidade=porto").get_json()["total"] == 0
    assert como("instalador").get("/api/items/pendentes").status_code == 403


def test_estatisticas_de_itens(app, como, projeto):
    itens = criar_itens(app, projeto["id"], "cortina", quantidade=3)
    forcar_status(app, itens[0]["id"], "instalado")
    stats = como("gestor").get("/api/items/stats").get_json()["data"]
    assert stats["total"] == 3
    assert stats["pendente"] == 2
    assert stats["instalado"] == 1
    assert stats["cancelado"] == 0


def test_criar_item_com_ambiente_numerico(como, projeto):
    gestor = como("gestor")
    resp = gestor.post("/api/items", json={"projeto": projeto["id"], "tipo": "calha", "ambiente": 101})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Ambiente é obrigatório"

    resp = gestor.post(f"/api/projects/{projeto['id']}/items", json={"tipo": "cortina", "ambiente": 101})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Ambiente é obrigatório"


def test_observacoes_que_nao_sao_texto(app, como, projeto):
    item = criar_itens(app, projeto["id"], "calha")[0]
    resp = como("medidor").put(
        f"/api/items/{item['id']}/medicao", json={"largura": 100, "altura": 100, "observacoes": 42}
    )
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Observações devem ser texto"
