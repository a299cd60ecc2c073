"""Hierarquia de erros do pipeline de importação."""


class ArticlesError(Exception):
    """Base de todos os erros do serviço."""

    status_code = 500


class FeedValidationError(ArticlesError):
    """URL ausente, malformada ou fora da allow-list."""

    status_code = 422


class FeedFetchError(ArticlesError):
    """Falha de rede ou documento que não é um feed."""

    status_code = 502


class EmptyFeedError(ArticlesError):
    """Feed parseado mas sem nenhum item (levantado depois do registro no ledger)."""

    status_code = 502


class StorageError(ArticlesError):
    """Qualquer falha de persistência que não seja conflito de chave única."""

    status_code = 500


class StorageConflictError(StorageError):
    # tratado internamente pelo reconciler (insert -> update), nunca chega ao cliente
    pass
