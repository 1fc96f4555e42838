"""Spanish error messages returned by validation rules."""

from typing import Any, Iterable

INITIAL_MESSAGE = "La respuesta de la pregunta "

REQUIRED = "es requerida"
EMPTY = "no puede estar vacía"
MAX_LENGTH = "no puede tener más de {length} caracteres"
MIN_LENGTH = "no puede tener menos de {length} caracteres"
EMAIL = "debe ser un correo electrónico válido"
NUMBER = "debe ser un número"
CI = "no es un número de cédula válido"
POSITIVE = "debe ser mayor a 0"
NEGATIVE = "debe ser menor a 0"
POSITIVE_OR_ZERO = "debe ser mayor o igual a 0"
NEGATIVE_OR_ZERO = "debe ser menor o igual a 0"
GREATER_THAN = "debe ser mayor a {min}"
LESS_THAN = "debe ser menor a {max}"
GREATER_THAN_OR_EQUAL = "debe ser mayor o igual a {min}"
LESS_THAN_OR_EQUAL = "debe ser menor o igual a {max}"
IN_RANGE = "debe estar entre {min} y {max}"
IN_LIST = "debe ser una de las opciones: {options}"

# The only message that does not open with INITIAL_MESSAGE
NO_SELECTION = "Debe seleccionar al menos una opción en la pregunta {question_id}"


def for_question(question_id: Any, template: str, **params: Any) -> str:
    """Build '<INITIAL_MESSAGE><question_id> <detail>'."""
    return f"{INITIAL_MESSAGE}{question_id} {template.format(**params)}"


def no_selection(question_id: Any) -> str:
    return NO_SELECTION.format(question_id=question_id)


def format_options(values: Iterable[Any]) -> str:
    """Render allowed options as '[a, b, c]'."""
    return "[" + ", ".join(str(v) for v in values) + "]"
