"""
Exceptions for Stockwatch.

All errors carry a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class StockwatchError(Exception):
    """
    Base structured exception.

    Usage:
        try:
            stock.issue(10, batch, user=user)
        except StockError as e:
            if e.code == 'INSUFFICIENT_QUANTITY':
                print(f"Só tem {e.available} disponível")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class StockError(StockwatchError):
    """Errors raised by stock movements (receive, issue, transfer...)."""

    _default_messages = {
        'INVALID_QUANTITY': 'Quantidade inválida (deve ser positiva)',
        'INSUFFICIENT_QUANTITY': 'Quantidade insuficiente no lote',
        'REASON_REQUIRED': 'Motivo é obrigatório',
        'SAME_WAREHOUSE': 'Origem e destino devem ser armazéns diferentes',
        'WAREHOUSE_MISMATCH': 'Armazém não pertence à mesma empresa do lote',
        'CAPACITY_EXCEEDED': 'Capacidade do armazém de destino excedida',
        'FUTURE_ENTRY_DATE': 'Data de entrada no futuro',
        'INVALID_TRANSFER': 'Transferência inválida ou já concluída',
    }

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)


class AlertError(StockwatchError):
    """Errors raised by alert lifecycle actions."""

    _default_messages = {
        'INVALID_TRANSITION': 'Transição de status inválida para este alerta',
    }


class AgingError(StockwatchError):
    """Errors raised while classifying batch age."""

    _default_messages = {
        'INVALID_THRESHOLDS': 'Limites de envelhecimento inválidos',
        'FUTURE_ENTRY_DATE': 'Data de entrada no futuro',
    }
