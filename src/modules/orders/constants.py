"""Order domain constants.

Defines the manual status choices set by users, the derived alert
colors computed on every read, and the priority used to sort the
order list.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    EMITIDO = "emitido", "Emitido"
    ENVIADO_FORNECEDOR = "enviado_fornecedor", "Enviado ao Fornecedor"
    EM_TRANSITO = "em_transito", "Em Trânsito"
    CANCELADO = "cancelado", "Cancelado"
    DEVOLVIDO = "devolvido", "Devolvido"
    RECEBIDO = "recebido", "Recebido"


class AlertColor(models.TextChoices):
    EMITIDO = "emitido", "Emitido"
    ENVIADO = "enviado", "Enviado ao Fornecedor"
    EM_TRANSITO = "em_transito", "Em Trânsito"
    AGUARDANDO = "aguardando", "Aguardando Entrega"
    ATRASADO = "atrasado", "Atrasado"
    STANDBY = "standby", "Standby"
    SEM_COR = "sem_cor", "Sem cor"


# Lower value sorts first in the order list.
ALERT_PRIORITY: dict[str, int] = {
    AlertColor.ATRASADO: 1,
    AlertColor.AGUARDANDO: 2,
    AlertColor.EM_TRANSITO: 3,
    AlertColor.ENVIADO: 4,
    AlertColor.EMITIDO: 5,
    AlertColor.STANDBY: 6,
    AlertColor.SEM_COR: 7,
}

STANDBY_STATES: set[str] = {OrderStatus.CANCELADO, OrderStatus.DEVOLVIDO}

TERMINAL_STATES: set[str] = STANDBY_STATES | {OrderStatus.RECEBIDO}

# Days after creation at which a sent-to-supplier order is shown in transit.
SENT_TO_SUPPLIER_TRANSIT_DAYS = 2

# Days after creation at which any open order is shown in transit.
AUTO_TRANSIT_DAYS = 3

DEFAULT_AWAITING_DELIVERY_DAYS = 2

DEFAULT_EDIT_WINDOW_HOURS = 24

ORDER_CODE_MAX_RETRIES = 5

CSV_HEADER = ("Pedido", "Código", "Nome", "Cor", "Quantidade")

DISPLAY_DATE_FORMAT = "%d/%m/%Y"
