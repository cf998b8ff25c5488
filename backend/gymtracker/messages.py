"""User-facing messages, keyed by error/message key, per locale."""
from __future__ import annotations

GENERIC_KEY = "generic_error"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        GENERIC_KEY: "Something went wrong, please try again.",
        "routine_name_required": "Give the routine a name!",
        "routine_needs_exercise": "Add at least one exercise.",
        "routine_not_found": "Routine not found.",
        "row_not_deletable": "The first exercise of a new routine cannot be removed.",
        "row_out_of_range": "No exercise at that position.",
        "editor_closed": "No routine is being edited.",
        "session_not_found": "Session not found.",
        "no_active_workout": "There is no workout in progress.",
        "workout_in_progress": "A workout is already in progress.",
        "invalid_transition": "That action is not available right now.",
        "confirm_abort": "Leave the current workout? Unsaved progress will be lost.",
        "confirm_delete_routine": "Delete this routine?",
        "confirmation_required": "Please confirm this action.",
        "import_invalid_format": "The file is not a valid history export.",
        "import_nothing_new": "Nothing new to import.",
        "import_merged": "{count} sessions imported.",
        "workout_finished": "Workout finished!",
        "persistence_failed": "Could not reach storage, please retry.",
        "no_routines": "No routines yet. Create one!",
        "no_history": "No history yet.",
        "auth/invalid-email": "That email address is not valid.",
        "auth/weak-password": "The password must have at least 6 characters.",
        "auth/email-already-in-use": "That email is already registered.",
        "auth/invalid-credential": "Wrong email or password.",
    },
    "es": {
        GENERIC_KEY: "Algo salió mal, inténtalo de nuevo.",
        "routine_name_required": "Ponle un nombre a la rutina!",
        "routine_needs_exercise": "Agrega al menos un ejercicio.",
        "routine_not_found": "Rutina no encontrada.",
        "row_not_deletable": "El primer ejercicio de una rutina nueva no se puede borrar.",
        "row_out_of_range": "No hay ningún ejercicio en esa posición.",
        "editor_closed": "No se está editando ninguna rutina.",
        "session_not_found": "Sesión no encontrada.",
        "no_active_workout": "No hay ningún entrenamiento en curso.",
        "workout_in_progress": "Ya hay un entrenamiento en curso.",
        "invalid_transition": "Esa acción no está disponible ahora.",
        "confirm_abort": "¿Salir del entrenamiento actual? Se perderá el progreso no guardado.",
        "confirm_delete_routine": "¿Borrar esta rutina?",
        "confirmation_required": "Confirma esta acción.",
        "import_invalid_format": "El archivo no es un historial válido.",
        "import_nothing_new": "No hay nada nuevo que importar.",
        "import_merged": "{count} sesiones importadas.",
        "workout_finished": "Entrenamiento terminado! 💪",
        "persistence_failed": "No se pudo guardar, inténtalo de nuevo.",
        "no_routines": "No tienes rutinas. Crea una nueva!",
        "no_history": "Sin historial",
        "auth/invalid-email": "El correo electrónico no es válido.",
        "auth/weak-password": "La contraseña debe tener al menos 6 caracteres.",
        "auth/email-already-in-use": "Ese correo ya está registrado.",
        "auth/invalid-credential": "Correo o contraseña incorrectos.",
    },
}


def message(key: str, locale: str = "en", **params) -> str:
    """Look up ``key`` for ``locale``; unknown keys get the generic retry text."""
    table = MESSAGES.get(locale, MESSAGES["en"])
    text = table.get(key) or MESSAGES["en"].get(key) or table[GENERIC_KEY]
    return text.format(**params) if params else text
