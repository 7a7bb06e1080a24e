"""Preferencia de modo oscuro.

Configuración de proceso explícita: se lee una vez del almacenamiento al
construirse y solo cambia con `toggle()`. El renderer recibe el valor y el
callback de toggle; `apply` refleja el modo en la superficie visible.
"""

from __future__ import annotations

from typing import Callable

from core.interfaces.storage import KeyValueStore

DARK_MODE_KEY = "darkMode"


class ThemePreference:
    def __init__(
        self,
        storage: KeyValueStore,
        *,
        apply: Callable[[bool], None] | None = None,
    ) -> None:
        self._storage = storage
        self._apply = apply
        self._dark = storage.get_item(DARK_MODE_KEY) == "true"
        self._mirror()

    @property
    def is_dark(self) -> bool:
        return self._dark

    def toggle(self) -> bool:
        """Invierte el modo, lo persiste y lo refleja. Devuelve el nuevo valor."""

        self._dark = not self._dark
        self._storage.set_item(DARK_MODE_KEY, "true" if self._dark else "false")
        self._mirror()
        return self._dark

    def _mirror(self) -> None:
        if self._apply:
            self._apply(self._dark)
