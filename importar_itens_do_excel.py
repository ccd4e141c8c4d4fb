"""
Importa itens de uma planilha Excel para projetos já cadastrados.

Colunas esperadas (cabeçalho na primeira linha):
    projeto | tipo | ambiente | quantidade

Uso:
    python importar_itens_do_excel.py caminho/para/itens.xlsx
"""
import sys

import pandas as pd

from cortinados import create_app, db
from cortinados.services import item_service, projeto_service
from cortinados.services.erros import ErroDominio

COLUNAS = ["projeto", "tipo", "ambiente", "quantidade"]


def carregar_planilha(excel_path: str) -> pd.DataFrame:
    df = pd.read_excel(excel_path)
    df.columns = [str(c).strip().lower() for c in df.columns]
    faltando = [c for c in COLUNAS if c not in df.columns]
    if faltando:
        raise SystemExit(f"Colunas ausentes na planilha: {', '.join(faltando)}")
    return df[COLUNAS]


def importar(df: pd.DataFrame) -> int:
    criados = 0
    for linha, row in df.iterrows():
        if pd.isna(row["projeto"]) or pd.isna(row["tipo"]) or pd.isna(row["ambiente"]):
            continue  # ignora linhas incompletas

        projeto = projeto_service.buscar_por_codigo(str(row["projeto"]))
        if not projeto:
            print(f"Linha {linha + 2}: projeto {row['projeto']} não encontrado")
            continue

        try:
            quantidade = int(row["quantidade"]) if not pd.isna(row["quantidade"]) else 1
        except (TypeError, ValueError):
            print(f"Linha {linha + 2}: quantidade inválida ({row['quantidade']})")
            continue

        try:
            itens = item_service.criar_itens(
                projeto, str(row["tipo"]).strip().lower(), str(row["ambiente"]), quantidade
            )
        except ErroDominio as e:
            db.session.rollback()
            print(f"Linha {linha + 2}: {e.mensagem}")
            continue
        criados += len(itens)
    return criados


def main(argv) -> None:
    if len(argv) < 2:
        raise SystemExit("Uso: python importar_itens_do_excel.py <arquivo.xlsx>")

    df = carregar_planilha(argv[1])
    app = create_app()
    with app.app_context():
        total = importar(df)
    print(f"Importação concluída: {total} item(ns) criado(s).")


if __name__ == "__main__":
    main(sys.argv)
