"""
app/domain/enums.py

Closed classification types shared by the insight and kaizen pipelines.
"""

from __future__ import annotations

from enum import Enum


class RiskTier(str, Enum):
    """Machine health classification for one evaluation window."""

    VERDE = "VERDE"
    AMARELO = "AMARELO"
    VERMELHO = "VERMELHO"


class Severity(str, Enum):
    CRITICA = "CRITICA"
    ALTA = "ALTA"
    MEDIA = "MEDIA"
    BAIXA = "BAIXA"


class Category(str, Enum):
    TREINAMENTO = "TREINAMENTO"
    PADRONIZACAO = "PADRONIZACAO"
    MANUTENCAO = "MANUTENCAO"
    QUALIDADE = "QUALIDADE"
    PROCESSO = "PROCESSO"
    DADOS = "DADOS"


class DifficultyTier(str, Enum):
    """Operator adherence/problem classification."""

    ALTA = "ALTA"
    MEDIA = "MEDIA"
    BAIXA = "BAIXA"


SEVERITY_RANK: dict[Severity, int] = {
    Severity.CRITICA: 4,
    Severity.ALTA: 3,
    Severity.MEDIA: 2,
    Severity.BAIXA: 1,
}

DIFFICULTY_RANK: dict[DifficultyTier, int] = {
    DifficultyTier.ALTA: 3,
    DifficultyTier.MEDIA: 2,
    DifficultyTier.BAIXA: 1,
}
