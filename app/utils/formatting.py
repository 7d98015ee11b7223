from datetime import date

MEAL_LABELS = {
    "lunch": "comida",
    "dinner": "cena",
    "both": "comida y cena",
}

MONTH_ABBR = ["Ene", "Feb", "Mar", "Abr", "May", "Jun", "Jul", "Ago", "Sep", "Oct", "Nov", "Dic"]

ROLE_LABELS = {
    "it_admin": "Admin IT",
    "admin": "Admin",
    "manager": "Manager",
    "conserje": "Conserje",
}


def meal_label(meal_type) -> str:
    value = getattr(meal_type, "value", meal_type)
    return MEAL_LABELS.get(value, str(value))


def format_date_es(value: date) -> str:
    """Fecha al estilo es-ES sin ceros a la izquierda: 7/3/2025."""
    return f"{value.day}/{value.month}/{value.year}"


def apartment_label(number: int) -> str:
    # Los apartamentos 43-48 son los locales L1-L6
    if 43 <= number <= 48:
        return f"{number} (L{number - 42})"
    return str(number)


def join_es(items) -> str:
    items = [str(i) for i in items]
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + " y " + items[-1]
