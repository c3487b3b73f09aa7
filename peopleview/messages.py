"""User-facing notification texts, English and Spanish."""

from __future__ import annotations

TEXTS = {
    "en": {
        "title": "People",
        "successAddPerson": "Person added successfully.",
        "errorAddPerson": "The person could not be added.",
        "errorMissingFirstName": "First name is required.",
        "errorMissingLastName": "Last name is required.",
        "errorBirthDate": "Birth date cannot be in the future: ",
        "errorNoSelection": "Select at least one row to delete.",
        "errorDeleteRows": "The selected rows could not be deleted.",
        "deleteSuccessMessage": "Deleted {deleted} people. {remaining} remain.",
        "restoreSuccessTitle": "Basic data restored.",
        "restoreSuccessPrevious": "Rows before: {count}",
        "restoreSuccessNow": "Rows now: {count}",
        "restoreSuccessData": "The table holds the original four people again.",
        "errorRestore": "Basic data could not be restored.",
        "errorRestore2": "Restore failed: ",
        "errorLoad": "People could not be loaded.",
    },
    "es": {
        "title": "Personas",
        "successAddPerson": "Persona añadida correctamente.",
        "errorAddPerson": "No se pudo añadir la persona.",
        "errorMissingFirstName": "El nombre es obligatorio.",
        "errorMissingLastName": "El apellido es obligatorio.",
        "errorBirthDate": "La fecha de nacimiento no puede ser futura: ",
        "errorNoSelection": "Selecciona al menos una fila para eliminar.",
        "errorDeleteRows": "No se pudieron eliminar las filas seleccionadas.",
        "deleteSuccessMessage": "Eliminadas {deleted} personas. Quedan {remaining}.",
        "restoreSuccessTitle": "Datos básicos restaurados.",
        "restoreSuccessPrevious": "Filas antes: {count}",
        "restoreSuccessNow": "Filas ahora: {count}",
        "restoreSuccessData": "La tabla vuelve a tener las cuatro personas originales.",
        "errorRestore": "No se pudieron restaurar los datos básicos.",
        "errorRestore2": "Error en la restauración: ",
        "errorLoad": "No se pudieron cargar las personas.",
    },
}

DEFAULT_LOCALE = "en"


def get_text(key: str, locale: str = DEFAULT_LOCALE, **fmt) -> str:
    table = TEXTS.get(locale, TEXTS[DEFAULT_LOCALE])
    msg = table.get(key) or TEXTS[DEFAULT_LOCALE][key]
    return msg.format(**fmt) if fmt else msg
