"""Criando tabelas de usuarios, projetos e itens

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 09:12:40.318207

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c9a7d2b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # --- 1. Usuários ---
    op.create_table('usuarios',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nome', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('ativo', sa.Boolean(), nullable=False),
        sa.Column('telefone', sa.String(length=20), nullable=True),
        sa.Column('empresa', sa.String(length=100), nullable=True),
        sa.Column('criado_em', sa.DateTime(), nullable=False),
        sa.Column('atualizado_em', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    with op.batch_alter_table('usuarios', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_usuarios_role'), ['role'], unique=False)
        batch_op.create_index(batch_op.f('ix_usuarios_ativo'), ['ativo'], unique=False)

    # --- 2. Projetos (hotéis) ---
    op.create_table('projetos',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('codigo', sa.String(length=8), nullable=False),
        sa.Column('nome_hotel', sa.String(length=200), nullable=False),
        sa.Column('endereco', sa.String(length=300), nullable=False),
        sa.Column('cidade', sa.String(length=100), nullable=False),
        sa.Column('distrito', sa.String(length=100), nullable=False),
        sa.Column('codigo_postal', sa.String(length=8), nullable=False),
        sa.Column('contato_nome', sa.String(length=100), nullable=False),
        sa.Column('contato_telefone', sa.String(length=20), nullable=False),
        sa.Column('contato_email', sa.String(length=120), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('data_inicio', sa.DateTime(), nullable=False),
        sa.Column('data_prevista', sa.DateTime(), nullable=True),
        sa.Column('data_conclusao', sa.DateTime(), nullable=True),
        sa.Column('observacoes', sa.Text(), nullable=True),
        sa.Column('criado_por_id', sa.Integer(), nullable=False),
        sa.Column('criado_em', sa.DateTime(), nullable=False),
        sa.Column('atualizado_em', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['criado_por_id'], ['usuarios.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('codigo')
    )
    with op.batch_alter_table('projetos', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_projetos_cidade'), ['cidade'], unique=False)
        batch_op.create_index(batch_op.f('ix_projetos_distrito'), ['distrito'], unique=False)
        batch_op.create_index(batch_op.f('ix_projetos_status'), ['status'], unique=False)
        batch_op.create_index(batch_op.f('ix_projetos_data_inicio'), ['data_inicio'], unique=False)

    # --- 3. Itens (cortinas e calhas) ---
    op.create_table('itens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('codigo', sa.String(length=20), nullable=False),
        sa.Column('projeto_id', sa.Integer(), nullable=False),
        sa.Column('tipo', sa.String(length=10), nullable=False),
        sa.Column('ambiente', sa.String(length=100), nullable=False),
        sa.Column('largura', sa.Float(), nullable=True),
        sa.Column('altura', sa.Float(), nullable=True),
        sa.Column('profundidade', sa.Float(), nullable=True),
        sa.Column('medidas_observacoes', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('qr_code', sa.Text(), nullable=False),
        sa.Column('qr_code_url', sa.String(length=300), nullable=False),
        sa.Column('medido_por_id', sa.Integer(), nullable=True),
        sa.Column('medido_em', sa.DateTime(), nullable=True),
        sa.Column('medicao_observacoes', sa.String(length=500), nullable=True),
        sa.Column('producao_iniciado_em', sa.DateTime(), nullable=True),
        sa.Column('producao_finalizado_em', sa.DateTime(), nullable=True),
        sa.Column('produzido_por_id', sa.Integer(), nullable=True),
        sa.Column('producao_observacoes', sa.String(length=500), nullable=True),
        sa.Column('logistica_processado_em', sa.DateTime(), nullable=True),
        sa.Column('logistica_processado_por_id', sa.Integer(), nullable=True),
        sa.Column('logistica_observacoes', sa.String(length=500), nullable=True),
        sa.Column('instalado_em', sa.DateTime(), nullable=True),
        sa.Column('instalado_por_id', sa.Integer(), nullable=True),
        sa.Column('instalacao_observacoes', sa.String(length=500), nullable=True),
        sa.Column('criado_em', sa.DateTime(), nullable=False),
        sa.Column('atualizado_em', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['projeto_id'], ['projetos.id'], ),
        sa.ForeignKeyConstraint(['medido_por_id'], ['usuarios.id'], ),
        sa.ForeignKeyConstraint(['produzido_por_id'], ['usuarios.id'], ),
        sa.ForeignKeyConstraint(['logistica_processado_por_id'], ['usuarios.id'], ),
        sa.ForeignKeyConstraint(['instalado_por_id'], ['usuarios.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('codigo')
    )
    with op.batch_alter_table('itens', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_itens_projeto_id'), ['projeto_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_itens_tipo'), ['tipo'], unique=False)
        batch_op.create_index(batch_op.f('ix_itens_status'), ['status'], unique=False)
        batch_op.create_index(batch_op.f('ix_itens_medido_por_id'), ['medido_por_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_itens_medido_em'), ['medido_em'], unique=False)


def downgrade():
    # Ordem inversa por causa das FKs
    op.drop_table('itens')
    op.drop_table('projetos')
    op.drop_table('usuarios')
