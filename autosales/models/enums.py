import enum


class RoleName(enum.Enum):
    admin = "admin"
    gerente = "gerente"
    vendedor = "vendedor"
    asistente = "asistente"
    inventario = "inventario"


class InvoiceStatus(enum.Enum):
    pending = "pending"
    issued = "issued"
