"""Serviços de domínio: códigos, permissões, QR, itens, projetos e usuários."""
