# app/db/append_only.py
"""
Protección de tablas de solo inserción (auditoría).

Se registran eventos de mapper que impiden UPDATE y DELETE desde el ORM.
`mutable` permite excepciones por columna (p.ej. el estado de un feedback).
"""
from sqlalchemy import event, inspect

from app.core.exceptions import AppendOnlyViolation


def append_only(*mutable: str):
    def decorator(model):
        allowed = set(mutable)

        @event.listens_for(model, "before_update")
        def _block_update(mapper, connection, target):
            state = inspect(target)
            changed = {
                attr.key
                for attr in state.attrs
                if attr.history.has_changes()
            }
            # updated_at lo gestiona la base de datos
            changed.discard("updated_at")
            forbidden = changed - allowed
            if forbidden:
                raise AppendOnlyViolation(
                    f"Los registros de {model.__tablename__} no se pueden modificar",
                    details=", ".join(sorted(forbidden)),
                )

        @event.listens_for(model, "before_delete")
        def _block_delete(mapper, connection, target):
            raise AppendOnlyViolation(
                f"Los registros de {model.__tablename__} no se pueden eliminar"
            )

        return model

    return decorator
